"""Pydantic models for the flattened, resolved output of a run."""

from pydantic import BaseModel, ConfigDict, Field


class OutputModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class DtoEnumValue(OutputModel):
    """One enum value: generated name, serialized label and protobuf number."""

    name: str
    label: str
    value: int


class DtoEnum(OutputModel):
    """A flattened enum with its excluded values already removed."""

    name: str
    proto_go_name: str
    values: list[DtoEnumValue] = Field(default_factory=list)
    comment: str = ""

    @property
    def labels(self) -> list[str]:
        return [value.label for value in self.values]


class Validation(OutputModel):
    """Constraints for one field, following JSON Schema keywords.

    Optional bounds use ``None`` for "not set", so a bound of ``0`` stays distinct from
    no bound at all.
    """

    read_only: bool = False
    deprecated: bool = False
    required: bool = False
    minimum: float | None = None
    exclusive_minimum: float | None = None
    maximum: float | None = None
    exclusive_maximum: float | None = None
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    format: str | None = None
    min_items: int | None = None
    max_items: int | None = None
    unique: bool = False
    enum_values: list[str] = Field(default_factory=list)
    multiple_of: float | None = None

    @property
    def has_minimum(self) -> bool:
        return self.minimum is not None

    @property
    def has_exclusive_minimum(self) -> bool:
        return self.exclusive_minimum is not None

    @property
    def has_maximum(self) -> bool:
        return self.maximum is not None

    @property
    def has_exclusive_maximum(self) -> bool:
        return self.exclusive_maximum is not None


class DtoField(OutputModel):
    name: str
    proto_go_name: str
    json_name: str
    go_type: str
    proto_go_type: str
    is_map: bool = False
    is_primitive: bool = False
    is_repeated: bool = False
    one_of: str = ""
    comment: str = ""
    example: str = ""
    enum: DtoEnum | None = None
    validation: Validation = Field(default_factory=Validation)


class DtoMessage(OutputModel):
    name: str
    proto_go_name: str
    fields: list[DtoField] = Field(default_factory=list)
    one_ofs: dict[str, list[DtoField]] = Field(default_factory=dict)
    comment: str = ""


class OutputUnit(OutputModel):
    """Everything generated for one requested schema unit."""

    name: str
    source: str
    package_name: str
    proto_go_import: str
    imports: list[str] = Field(default_factory=list)
    messages: list[DtoMessage] = Field(default_factory=list)
    enums: list[DtoEnum] = Field(default_factory=list)
