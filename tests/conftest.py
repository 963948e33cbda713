from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from hypothesis import strategies as st
from hypothesis.strategies import composite

from protodto.config import EngineConfig
from protodto.model import DtoField, DtoMessage, OutputUnit
from protodto.schema import SchemaRequest, load_request, load_request_from_dict
from protodto.transform import transform


class TestSchemaData:
    TESTS_DATA_DIR: Path = Path(__file__).parent / "data"
    EXAMPLE_REQUEST: Path = TESTS_DATA_DIR / "example.yaml"
    EXAMPLE_OUTPUT_NAME = "example.dto.go"


def make_field(name: str, kind: str = "TYPE_STRING", number: int = 1, **extra: Any) -> dict[str, Any]:
    """Field declaration in snake_case descriptor JSON, public unless options are given."""
    field: dict[str, Any] = {"name": name, "number": number, "type": kind, "options": {"public": True}}
    field.update(extra)
    return field


def make_enum(name: str, *values: str, **extra: Any) -> dict[str, Any]:
    enum: dict[str, Any] = {"name": name, "value": [{"name": value, "number": i} for i, value in enumerate(values)]}
    enum.update(extra)
    return enum


def make_unit(
    name: str,
    package: str,
    messages: list[dict[str, Any]] | None = None,
    enums: list[dict[str, Any]] | None = None,
    go_package: str | None = None,
    **extra: Any,
) -> dict[str, Any]:
    unit: dict[str, Any] = {
        "name": name,
        "package": package,
        "message_type": messages or [],
        "enum_type": enums or [],
    }
    if go_package is not None:
        unit["options"] = {"go_package": go_package}
    unit.update(extra)
    return unit


def make_request(*units: dict[str, Any], generate: list[str] | None = None) -> SchemaRequest:
    return load_request_from_dict({"proto_file": list(units), "file_to_generate": generate or []})


def find_message(output: OutputUnit, name: str) -> DtoMessage:
    return next(message for message in output.messages if message.name == name)


def find_field(message: DtoMessage, name: str) -> DtoField:
    return next(field for field in message.fields if field.name == name)


@pytest.fixture(scope="module")
def example_request() -> SchemaRequest:
    assert TestSchemaData.EXAMPLE_REQUEST.exists(), f"Missing test file: {TestSchemaData.EXAMPLE_REQUEST}"
    return load_request(TestSchemaData.EXAMPLE_REQUEST)


@pytest.fixture(scope="module")
def example_output(example_request: SchemaRequest) -> OutputUnit:
    outputs = transform(example_request, EngineConfig())
    return outputs[TestSchemaData.EXAMPLE_OUTPUT_NAME]


@pytest.fixture(scope="module")
def example_message(example_output: OutputUnit) -> DtoMessage:
    return find_message(example_output, "Message")


@pytest.fixture(autouse=True)
def no_all_public_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Runs must not pick up ALL_PUBLIC from the developer's shell."""
    monkeypatch.delenv("ALL_PUBLIC", raising=False)


IDENTIFIER_WORDS = st.text(alphabet="abcdefghijklmnopqrstuvwxyz", min_size=1, max_size=8)


@composite
def snake_case_identifier_strategy(draw: Callable[[st.SearchStrategy[Any]], Any]) -> str:
    """Generate identifiers such as ``user_account_id``."""
    words = draw(st.lists(IDENTIFIER_WORDS, min_size=1, max_size=4))
    return "_".join(words)
