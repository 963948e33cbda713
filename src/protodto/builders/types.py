from dataclasses import dataclass, field, replace

from protodto import log
from protodto.exceptions import SchemaError, UnsupportedTypeError
from protodto.model import DtoEnum
from protodto.naming import go_case
from protodto.registry import EnumEntry, MessageEntry, RegistryEntry, TypeRegistry
from protodto.schema.models import FieldDecl, FieldKind, SchemaUnit

TIMESTAMP_TYPE = ".google.protobuf.Timestamp"
TIMESTAMP_IMPORTS = ("time", "google.golang.org/protobuf/types/known/timestamppb")

SCALAR_GO_TYPES = {
    FieldKind.BOOL: "bool",
    FieldKind.INT32: "int32",
    FieldKind.SINT32: "int32",
    FieldKind.SFIXED32: "int32",
    FieldKind.INT64: "int64",
    FieldKind.SINT64: "int64",
    FieldKind.SFIXED64: "int64",
    FieldKind.UINT32: "uint32",
    FieldKind.FIXED32: "uint32",
    FieldKind.UINT64: "uint64",
    FieldKind.FIXED64: "uint64",
    FieldKind.FLOAT: "float32",
    FieldKind.DOUBLE: "float64",
    FieldKind.STRING: "string",
    FieldKind.BYTES: "[]byte",
}


@dataclass(frozen=True)
class TypeMapping:
    """Resolved type of one field.

    ``go_type`` is the generated type expression, ``proto_go_type`` the type protoc-gen-go
    uses for the same field, needed to convert between the two.
    """

    go_type: str
    proto_go_type: str
    is_primitive: bool
    enum: DtoEnum | None = None

    @property
    def is_map(self) -> bool:
        return self.go_type.startswith("map[")

    def as_map(self) -> "TypeMapping":
        return replace(self, go_type=f"map[string]{self.go_type}", proto_go_type=f"map[string]{self.proto_go_type}")

    def as_slice(self) -> "TypeMapping":
        return replace(self, go_type=f"[]{self.go_type}", proto_go_type=f"[]{self.proto_go_type}")


@dataclass
class UnitContext:
    """Output state of the unit currently being built."""

    unit: SchemaUnit
    imports: set[str] = field(default_factory=set)

    @property
    def namespace(self) -> str:
        return self.unit.go_package_name

    @property
    def import_path(self) -> str:
        return self.unit.go_import_path

    def require(self, *imports: str) -> None:
        self.imports.update(imports)


class TypeMapper:
    """
    Resolve declared field types to Go type expressions.

    Rules in priority order: scalars, the well-known timestamp, map entries (unwrapped to
    ``map[string]V``), enums, messages. Repeated fields are wrapped in a slice last.
    """

    def __init__(self, registry: TypeRegistry):
        self.registry = registry

    def map_type(self, context: UnitContext, field_decl: FieldDecl) -> TypeMapping:
        mapping = self._map_element(context, field_decl)
        if field_decl.is_repeated and not mapping.is_map:
            return mapping.as_slice()
        return mapping

    def _map_element(self, context: UnitContext, field_decl: FieldDecl) -> TypeMapping:
        scalar = SCALAR_GO_TYPES.get(field_decl.type)
        if scalar is not None:
            return TypeMapping(scalar, scalar, True)

        if field_decl.type == FieldKind.MESSAGE:
            return self._map_message(context, field_decl)

        if field_decl.type == FieldKind.ENUM:
            return self._map_enum(context, field_decl)

        raise UnsupportedTypeError(field_decl.type.value, field_decl.name)

    def _map_message(self, context: UnitContext, field_decl: FieldDecl) -> TypeMapping:
        if field_decl.type_name == TIMESTAMP_TYPE:
            context.require(*TIMESTAMP_IMPORTS)
            return TypeMapping("*time.Time", "*timestamppb.Timestamp", False)

        entry = self.registry.resolve(field_decl.type_name, field_decl.name)
        if not isinstance(entry, MessageEntry):
            raise SchemaError(f"Field '{field_decl.name}' expects a message but '{entry.type_ref}' is an enum")

        if entry.decl.is_map_entry:
            # Entry fields are always (key, value); keys are treated as strings.
            if len(entry.decl.field) != 2:
                raise SchemaError(f"Map entry '{entry.type_ref}' must declare exactly a key and a value")
            return self._map_element(context, entry.decl.field[1]).as_map()

        name = go_case(*entry.scope, entry.decl.name, initialisms=self.registry.initialisms)
        return TypeMapping(
            f"*{self._qualifier(context, entry)}{name}",
            f"*{entry.origin.namespace}.{entry.proto_go_name}",
            False,
        )

    def _map_enum(self, context: UnitContext, field_decl: FieldDecl) -> TypeMapping:
        entry = self.registry.get(field_decl.type_name)
        if not isinstance(entry, EnumEntry):
            log.error(f"Enum '{field_decl.type_name}' used by field '{field_decl.name}' is not registered")
            name = go_case(*self._local_names(context, field_decl.type_name), initialisms=self.registry.initialisms)
            return TypeMapping(name, name, False)

        return TypeMapping(
            f"{self._qualifier(context, entry)}{entry.model.name}",
            f"{entry.origin.namespace}.{entry.proto_go_name}",
            False,
            entry.model,
        )

    def _qualifier(self, context: UnitContext, entry: RegistryEntry) -> str:
        """Package prefix for a type, registering its import when it comes from elsewhere."""
        if entry.origin.import_path == context.import_path:
            return ""
        context.require(entry.origin.import_path)
        return f"{entry.origin.namespace}."

    def _local_names(self, context: UnitContext, type_ref: str) -> list[str]:
        prefix = f".{context.unit.package}." if context.unit.package else "."
        if type_ref.startswith(prefix):
            type_ref = type_ref[len(prefix) :]
        return type_ref.lstrip(".").split(".")
