import pytest

from protodto.exceptions import DuplicateTypeError, UnresolvedTypeError
from protodto.registry import EnumEntry, MessageEntry, TypeRegistry, type_ref_for, walk_unit
from protodto.schema import SchemaRequest, SchemaUnit
from tests.conftest import make_enum, make_field, make_unit


@pytest.fixture(scope="module")
def registry(example_request: SchemaRequest) -> TypeRegistry:
    return TypeRegistry.from_units(example_request.proto_file)


class TestWalkUnit:
    def test_children_before_parents(self, example_request: SchemaRequest) -> None:
        items = list(walk_unit(example_request.proto_file[2]))
        assert [item.type_ref for item in items] == [
            ".example.Global",
            ".example.Message.Sub.CamelCaseEnum",
            ".example.Message.Sub",
            ".example.Message.KvEntry",
            ".example.Message.KvComplexEntry",
            ".example.Message",
            ".example.Another",
        ]

    def test_structural_paths(self, example_request: SchemaRequest) -> None:
        paths = {item.type_ref: item.path for item in walk_unit(example_request.proto_file[2])}
        assert paths[".example.Global"] == (5, 0)
        assert paths[".example.Message"] == (4, 0)
        assert paths[".example.Another"] == (4, 1)
        assert paths[".example.Message.KvComplexEntry"] == (4, 0, 3, 2)
        assert paths[".example.Message.Sub.CamelCaseEnum"] == (4, 0, 3, 0, 4, 0)

    def test_scopes(self, example_request: SchemaRequest) -> None:
        items = {item.type_ref: item for item in walk_unit(example_request.proto_file[2])}
        assert items[".example.Message"].scope == ()
        assert items[".example.Message.Sub"].scope == ("Message",)
        assert items[".example.Message.Sub.CamelCaseEnum"].names == ("Message", "Sub", "CamelCaseEnum")

    def test_empty_unit(self) -> None:
        assert list(walk_unit(SchemaUnit(name="empty.proto"))) == []

    @pytest.mark.parametrize(
        "package,names,expected",
        [
            ("example", ["Message"], ".example.Message"),
            ("a.b", ["Outer", "Inner"], ".a.b.Outer.Inner"),
            ("", ["Message"], ".Message"),
        ],
    )
    def test_type_ref_for(self, package: str, names: list[str], expected: str) -> None:
        assert type_ref_for(package, names) == expected


class TestTypeRegistry:
    def test_registers_every_unit(self, registry: TypeRegistry) -> None:
        assert len(registry) == 10
        assert ".google.protobuf.Timestamp" in registry
        assert ".common.Money" in registry
        assert ".example.Message.KvEntry" in registry
        assert ".example.Missing" not in registry

    def test_entries_keep_registration_order(self, registry: TypeRegistry) -> None:
        refs = [entry.type_ref for entry in registry.entries()]
        assert refs[:4] == [".google.protobuf.Timestamp", ".common.Region", ".common.Money", ".example.Global"]

    def test_enum_models_are_built_on_registration(self, registry: TypeRegistry) -> None:
        entry = registry.resolve(".example.Global")
        assert isinstance(entry, EnumEntry)
        assert entry.model.name == "Global"
        assert entry.model.labels == ["UNKNOWN", "ONE", "THREE"]
        assert entry.model.comment == "Global enum comment"

    def test_nested_enum(self, registry: TypeRegistry) -> None:
        entry = registry.resolve(".example.Message.Sub.CamelCaseEnum")
        assert isinstance(entry, EnumEntry)
        assert entry.model.name == "MessageSubCamelCaseEnum"
        assert entry.proto_go_name == "Message_Sub_CamelCaseEnum"
        assert entry.model.comment == "Camel enum."

    def test_message_origin(self, registry: TypeRegistry) -> None:
        entry = registry.resolve(".common.Money")
        assert isinstance(entry, MessageEntry)
        assert entry.origin.unit == "common/types.proto"
        assert entry.origin.namespace == "common"
        assert entry.origin.import_path == "github.com/acme/example/common"

    def test_nested_message_proto_go_name(self, registry: TypeRegistry) -> None:
        entry = registry.resolve(".example.Message.Sub")
        assert isinstance(entry, MessageEntry)
        assert entry.proto_go_name == "Message_Sub"

    def test_resolve_unknown(self, registry: TypeRegistry) -> None:
        with pytest.raises(UnresolvedTypeError, match="Field 'owner' references unknown type '.example.Missing'"):
            registry.resolve(".example.Missing", "owner")

    def test_get_unknown_returns_none(self, registry: TypeRegistry) -> None:
        assert registry.get(".example.Missing") is None

    def test_duplicate_registration(self) -> None:
        first = SchemaUnit.model_validate(make_unit("a.proto", "shared", messages=[{"name": "Thing"}]))
        second = SchemaUnit.model_validate(make_unit("b.proto", "shared", enums=[make_enum("Thing", "NONE")]))

        registry = TypeRegistry()
        registry.register(first)
        with pytest.raises(DuplicateTypeError) as exc_info:
            registry.register(second)

        assert exc_info.value.type_ref == ".shared.Thing"
        assert exc_info.value.unit == "b.proto"

    def test_same_name_in_different_packages(self) -> None:
        registry = TypeRegistry.from_units(
            [
                SchemaUnit.model_validate(make_unit("a.proto", "a", messages=[{"name": "Thing"}])),
                SchemaUnit.model_validate(
                    make_unit("b.proto", "b", messages=[{"name": "Thing", "field": [make_field("id")]}])
                ),
            ]
        )
        assert ".a.Thing" in registry
        assert ".b.Thing" in registry

    def test_custom_initialisms(self) -> None:
        unit = SchemaUnit.model_validate(make_unit("a.proto", "a", enums=[make_enum("vin_kind", "VIN_UNKNOWN")]))
        registry = TypeRegistry.from_units([unit], {"VIN"})
        entry = registry.resolve(".a.vin_kind")
        assert isinstance(entry, EnumEntry)
        assert entry.model.name == "VINKind"
        assert entry.model.values[0].name == "VINUnknown"
