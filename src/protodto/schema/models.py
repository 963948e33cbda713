"""Pydantic models for compiled protobuf schema declarations.

The models accept the canonical JSON rendering of ``FileDescriptorSet`` and
``CodeGeneratorRequest`` (lowerCamelCase keys) as well as the same data with snake_case
keys. Custom annotations are read either from their extension keys, e.g.
``"[dto.public]"`` and ``"[validate.rules]"``, or from plain keys such as ``public``.
"""

import re
from enum import Enum
from functools import cached_property
from typing import Any, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from protodto.schema.comments import StructuralPath, build_comment_table

ANNOTATION_PACKAGE = "dto"
RULES_EXTENSION = "[validate.rules]"

GO_IDENTIFIER_PATTERN = re.compile(r"[^0-9A-Za-z_]")

E = TypeVar("E", bound=Enum)


def annotation(name: str, *aliases: str) -> AliasChoices:
    """Accepted keys for a custom annotation: plain names and the extension key."""
    return AliasChoices(*aliases, name, f"[{ANNOTATION_PACKAGE}.{name}]")


class FieldKind(str, Enum):
    DOUBLE = "TYPE_DOUBLE"
    FLOAT = "TYPE_FLOAT"
    INT64 = "TYPE_INT64"
    UINT64 = "TYPE_UINT64"
    INT32 = "TYPE_INT32"
    FIXED64 = "TYPE_FIXED64"
    FIXED32 = "TYPE_FIXED32"
    BOOL = "TYPE_BOOL"
    STRING = "TYPE_STRING"
    GROUP = "TYPE_GROUP"
    MESSAGE = "TYPE_MESSAGE"
    BYTES = "TYPE_BYTES"
    UINT32 = "TYPE_UINT32"
    ENUM = "TYPE_ENUM"
    SFIXED32 = "TYPE_SFIXED32"
    SFIXED64 = "TYPE_SFIXED64"
    SINT32 = "TYPE_SINT32"
    SINT64 = "TYPE_SINT64"


class FieldLabel(str, Enum):
    OPTIONAL = "LABEL_OPTIONAL"
    REQUIRED = "LABEL_REQUIRED"
    REPEATED = "LABEL_REPEATED"


# Descriptor numbering, in declaration order starting at 1.
FIELD_KIND_NUMBERS = {number: kind for number, kind in enumerate(FieldKind, start=1)}
FIELD_LABEL_NUMBERS = {number: label for number, label in enumerate(FieldLabel, start=1)}


def _descriptor_enum(value: Any, numbers: dict[int, E]) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        if value not in numbers:
            raise ValueError(f"unknown descriptor enum number {value}")
        return numbers[value]
    return value


class DescriptorModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True, extra="ignore")


# Constraint rules, modelled on protoc-gen-validate FieldRules.


class NumericRules(DescriptorModel):
    const: float | None = None
    lt: float | None = None
    lte: float | None = None
    gt: float | None = None
    gte: float | None = None
    in_: list[float] = Field(default_factory=list, alias="in")
    not_in: list[float] = Field(default_factory=list)


class StringRules(DescriptorModel):
    min_len: int | None = None
    max_len: int | None = None
    pattern: str | None = None
    uri: bool = False
    uri_ref: bool = False
    email: bool = False
    hostname: bool = False
    ipv4: bool = False
    ipv6: bool = False
    uuid: bool = False


class RepeatedRules(DescriptorModel):
    min_items: int | None = None
    max_items: int | None = None
    unique: bool | None = None


class EnumRules(DescriptorModel):
    defined_only: bool | None = None
    in_: list[int] = Field(default_factory=list, alias="in")
    not_in: list[int] = Field(default_factory=list)


class MessageRules(DescriptorModel):
    required: bool | None = None
    skip: bool | None = None


NUMERIC_RULE_KINDS = (
    "float_",
    "double",
    "int32",
    "int64",
    "uint32",
    "uint64",
    "sint32",
    "sint64",
    "fixed32",
    "fixed64",
    "sfixed32",
    "sfixed64",
)


class FieldRules(DescriptorModel):
    message: MessageRules | None = None
    float_: NumericRules | None = Field(None, alias="float")
    double: NumericRules | None = None
    int32: NumericRules | None = None
    int64: NumericRules | None = None
    uint32: NumericRules | None = None
    uint64: NumericRules | None = None
    sint32: NumericRules | None = None
    sint64: NumericRules | None = None
    fixed32: NumericRules | None = None
    fixed64: NumericRules | None = None
    sfixed32: NumericRules | None = None
    sfixed64: NumericRules | None = None
    string: StringRules | None = None
    repeated: RepeatedRules | None = None
    enum: EnumRules | None = None

    def numeric(self) -> NumericRules | None:
        """Return whichever numeric variant is set, if any."""
        for kind in NUMERIC_RULE_KINDS:
            rules = getattr(self, kind)
            if rules is not None:
                return rules
        return None


# Options


class FieldOptions(DescriptorModel):
    deprecated: bool = False
    public: bool = Field(False, validation_alias=annotation("public"))
    read_only: bool = Field(False, validation_alias=annotation("readOnly", "read_only"))
    name: str = Field("", validation_alias=annotation("name"))
    json_name: str = Field("", validation_alias=annotation("json", "json_name"))
    example: str = Field("", validation_alias=annotation("example"))
    multiple_of: float | None = Field(None, validation_alias=annotation("multipleOf", "multiple_of"))
    rules: FieldRules | None = Field(None, validation_alias=AliasChoices("rules", RULES_EXTENSION))


class EnumValueOptions(DescriptorModel):
    deprecated: bool = False
    exclude: bool = Field(False, validation_alias=annotation("exclude"))


class MessageOptions(DescriptorModel):
    deprecated: bool = False
    map_entry: bool = False


class FileOptions(DescriptorModel):
    go_package: str = ""


# Declarations


class FieldDecl(DescriptorModel):
    name: str
    number: int = 0
    label: FieldLabel = FieldLabel.OPTIONAL
    type: FieldKind
    type_name: str = ""
    json_name: str = ""
    oneof_index: int | None = None
    proto3_optional: bool = False
    options: FieldOptions = Field(default_factory=FieldOptions)

    @field_validator("type", mode="before")
    @classmethod
    def coerce_kind(cls, value: Any) -> Any:
        return _descriptor_enum(value, FIELD_KIND_NUMBERS)

    @field_validator("label", mode="before")
    @classmethod
    def coerce_label(cls, value: Any) -> Any:
        return _descriptor_enum(value, FIELD_LABEL_NUMBERS)

    @property
    def is_repeated(self) -> bool:
        return self.label == FieldLabel.REPEATED


class EnumValueDecl(DescriptorModel):
    name: str
    number: int = 0
    options: EnumValueOptions = Field(default_factory=EnumValueOptions)


class EnumDecl(DescriptorModel):
    name: str
    value: list[EnumValueDecl] = Field(default_factory=list)


class OneofDecl(DescriptorModel):
    name: str


class MessageDecl(DescriptorModel):
    name: str
    field: list[FieldDecl] = Field(default_factory=list)
    nested_type: list["MessageDecl"] = Field(default_factory=list)
    enum_type: list[EnumDecl] = Field(default_factory=list)
    oneof_decl: list[OneofDecl] = Field(default_factory=list)
    options: MessageOptions = Field(default_factory=MessageOptions)

    @property
    def is_map_entry(self) -> bool:
        """Whether this is the compiler-generated entry type behind a map field."""
        return self.options.map_entry


class SourceLocation(DescriptorModel):
    path: list[int] = Field(default_factory=list)
    leading_comments: str | None = None
    trailing_comments: str | None = None


class SourceCodeInfo(DescriptorModel):
    location: list[SourceLocation] = Field(default_factory=list)


class SchemaUnit(DescriptorModel):
    """One compiled .proto file."""

    name: str
    package: str = ""
    dependency: list[str] = Field(default_factory=list)
    message_type: list[MessageDecl] = Field(default_factory=list)
    enum_type: list[EnumDecl] = Field(default_factory=list)
    options: FileOptions = Field(default_factory=FileOptions)
    source_code_info: SourceCodeInfo = Field(default_factory=SourceCodeInfo)

    @cached_property
    def comments(self) -> dict[StructuralPath, str]:
        return build_comment_table(self.source_code_info.location)

    def comment_for(self, path: StructuralPath) -> str:
        return self.comments.get(path, "")

    @property
    def go_import_path(self) -> str:
        """Import path of the protobuf bindings generated for this unit."""
        go_package = self.options.go_package
        if go_package:
            return go_package.split(";", 1)[0]
        if self.package:
            return self.package.replace(".", "/")
        return self.name.rsplit("/", 1)[0] if "/" in self.name else ""

    @property
    def go_package_name(self) -> str:
        """Package name the generated bindings for this unit are declared in."""
        go_package = self.options.go_package
        if ";" in go_package:
            base = go_package.split(";", 1)[1]
        elif go_package:
            base = go_package.rsplit("/", 1)[-1]
        elif self.package:
            base = self.package.rsplit(".", 1)[-1]
        else:
            base = self.name.rsplit("/", 1)[-1].split(".", 1)[0]
        return GO_IDENTIFIER_PATTERN.sub("_", base)


class SchemaRequest(DescriptorModel):
    """All units needed to resolve types plus the names of the units to generate."""

    proto_file: list[SchemaUnit] = Field(
        default_factory=list, validation_alias=AliasChoices("proto_file", "protoFile", "file")
    )
    file_to_generate: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_files_to_generate(self) -> "SchemaRequest":
        known = {unit.name for unit in self.proto_file}
        missing = [name for name in self.file_to_generate if name not in known]
        if missing:
            raise ValueError(f"Files to generate are not part of the request: {', '.join(missing)}")
        return self

    @property
    def units_to_generate(self) -> list[SchemaUnit]:
        """Requested units in input order. An empty request list selects every unit."""
        if not self.file_to_generate:
            return list(self.proto_file)
        wanted = set(self.file_to_generate)
        return [unit for unit in self.proto_file if unit.name in wanted]
