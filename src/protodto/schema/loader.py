import json
from pathlib import Path
from typing import Any, cast

import yaml

from protodto import log
from protodto.schema.models import SchemaRequest

YAML_SUFFIXES = {".yaml", ".yml"}


def load_request_from_dict(raw: dict[str, Any]) -> SchemaRequest:
    """Validate an in-memory schema request.

    Args:
        raw: Mapping in the JSON shape of a CodeGeneratorRequest or FileDescriptorSet

    Returns:
        The validated SchemaRequest
    """
    request = SchemaRequest.model_validate(raw)
    log.debug(
        f"Loaded {len(request.proto_file)} schema units, {len(request.units_to_generate)} requested for output"
    )
    return request


def load_request(path: Path) -> SchemaRequest:
    """
    Load a schema request from a JSON or YAML file.

    Args:
        path: Path to a .json, .yaml or .yml file

    Returns:
        The validated SchemaRequest

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the file type is not supported, cannot be parsed or its root is not a mapping.
        ValidationError: If the content does not describe a schema request.
    """
    text = path.read_text(encoding="utf-8")

    raw: Any
    if path.suffix in YAML_SUFFIXES:
        try:
            raw = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ValueError(f"Malformed YAML in {path}: {e}") from e
    elif path.suffix == ".json":
        raw = json.loads(text)
    else:
        raise ValueError(f"Unsupported schema request file type '{path.suffix}' for {path}")

    if not isinstance(raw, dict):
        raise ValueError(f"Schema request root must be a mapping, got {type(raw).__name__}")

    log.debug("Loaded schema request from %s", path)
    return load_request_from_dict(cast(dict[str, Any], raw))
