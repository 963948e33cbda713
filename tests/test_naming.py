import pytest
from hypothesis import given

from protodto.naming import go_case, json_name, proto_go_field_name, proto_go_name, split_words
from tests.conftest import snake_case_identifier_strategy


class TestGoCase:
    @pytest.mark.parametrize(
        "parts,expected",
        [
            (("user_id",), "UserID"),
            (("http_server",), "HTTPServer"),
            (("HTTPServer",), "HTTPServer"),
            (("api_url",), "APIURL"),
            (("uuid",), "UUID"),
            (("num32",), "Num32"),
            (("camel_case_enum",), "CamelCaseEnum"),
            (("REGION_UNSPECIFIED",), "RegionUnspecified"),
            (("Outer", "user_id"), "OuterUserID"),
            (("Message", "Sub", "CamelCaseEnum"), "MessageSubCamelCaseEnum"),
            (("",), ""),
        ],
    )
    def test_default_initialisms(self, parts: tuple[str, ...], expected: str) -> None:
        assert go_case(*parts) == expected

    def test_custom_initialisms(self) -> None:
        assert go_case("vin_code") == "VinCode"
        assert go_case("vin_code", initialisms={"VIN"}) == "VINCode"

    @given(name=snake_case_identifier_strategy())
    def test_result_is_exported_identifier(self, name: str) -> None:
        result = go_case(name)
        assert result.isidentifier()
        assert result[0].isupper()
        assert result.lower() == name.replace("_", "")


class TestSplitWords:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("user_id", ["user", "id"]),
            ("userID", ["user", "ID"]),
            ("HTTPServer", ["HTTP", "Server"]),
            ("kv-complex.entry", ["kv", "complex", "entry"]),
            ("v2Api", ["v2", "Api"]),
        ],
    )
    def test_split(self, name: str, expected: list[str]) -> None:
        assert split_words(name) == expected


class TestProtoGoName:
    def test_top_level(self) -> None:
        assert proto_go_name("Message") == "Message"

    def test_nested_names_are_joined(self) -> None:
        assert proto_go_name("Message", "Sub") == "Message_Sub"

    @pytest.mark.parametrize(
        "parts,expected",
        [
            (("HTTPServer",), "HTTPServer"),
            (("URLInfo",), "URLInfo"),
            (("STATUS",), "STATUS"),
            (("Outer", "HTTPServer"), "Outer_HTTPServer"),
            (("Outer", "URL_KIND"), "Outer_URL_KIND"),
            (("lower",), "Lower"),
        ],
    )
    def test_declared_casing_is_kept(self, parts: tuple[str, ...], expected: str) -> None:
        assert proto_go_name(*parts) == expected


class TestProtoGoFieldName:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("only_one", "OnlyOne"),
            ("user_id", "UserId"),
            ("name", "Name"),
        ],
    )
    def test_field_names(self, name: str, expected: str) -> None:
        assert proto_go_field_name(name) == expected


class TestJsonName:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("primitiveArray", "primitive_array"),
            ("userId", "user_id"),
            ("tag", "tag"),
        ],
    )
    def test_snake_case(self, name: str, expected: str) -> None:
        assert json_name(name) == expected
