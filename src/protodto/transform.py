from pathlib import Path

from protodto import log
from protodto.builders.traversal import FlatteningEngine
from protodto.config import EngineConfig, resolve_config
from protodto.exceptions import SchemaError
from protodto.model import OutputUnit
from protodto.naming import COMMON_INITIALISMS
from protodto.registry import TypeRegistry
from protodto.schema.loader import load_request
from protodto.schema.models import SchemaRequest


def transform(request: SchemaRequest, config: EngineConfig | None = None) -> dict[str, OutputUnit]:
    """
    Transform a compiled schema request into flattened output models.

    Every unit of the request is registered first, dependencies included. Only the
    requested units are then built, in input order.

    Args:
        request: All schema units plus the names of the units to generate
        config: Engine settings. When omitted, defaults with the ALL_PUBLIC environment
            variable applied

    Returns:
        dict[str, OutputUnit]: Output models keyed by output identifier. Units without any
        message or enum are left out.

    Raises:
        SchemaError: On duplicate types, unresolvable references or unsupported field kinds
    """
    config = config or resolve_config()
    units = request.units_to_generate
    log.info(f"Transforming {len(units)} of {len(request.proto_file)} schema units")

    try:
        registry = TypeRegistry.from_units(request.proto_file, COMMON_INITIALISMS | set(config.initialisms))
        engine = FlatteningEngine(registry, config)

        outputs: dict[str, OutputUnit] = {}
        for unit in units:
            output = engine.build_unit(unit)
            if output is None:
                log.info(f"Skipping {unit.name}: no messages or enums")
                continue
            outputs[output.name] = output
    except SchemaError as e:
        log.error(f"Schema transformation failed: {e}")
        raise

    log.info(f"Successfully built {len(outputs)} output units")
    return outputs


def transform_file(request_path: Path, config: EngineConfig | None = None) -> dict[str, OutputUnit]:
    """Load a schema request from a JSON or YAML file and transform it."""
    return transform(load_request(request_path), config)
