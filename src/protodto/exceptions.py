"""Errors raised while resolving and flattening a schema graph.

Every error here is fatal for a run: the schema compiler has already validated the
input, so these point at a construct the engine does not support or at a logic error.
"""


class SchemaError(ValueError):
    """Base class for schema inconsistencies that abort a run."""


class DuplicateTypeError(SchemaError):
    """A fully-qualified type name was registered twice."""

    def __init__(self, type_ref: str, unit: str) -> None:
        self.type_ref = type_ref
        self.unit = unit
        super().__init__(f"Type '{type_ref}' from '{unit}' is already registered")


class UnresolvedTypeError(SchemaError):
    """A type reference has no registry entry."""

    def __init__(self, type_ref: str, field: str | None = None) -> None:
        self.type_ref = type_ref
        self.field = field
        if field:
            message = f"Field '{field}' references unknown type '{type_ref}'"
        else:
            message = f"Unknown type '{type_ref}'"
        super().__init__(message)


class UnsupportedTypeError(SchemaError):
    """A field uses a descriptor type kind that cannot be mapped."""

    def __init__(self, kind: str, field: str) -> None:
        self.kind = kind
        self.field = field
        super().__init__(f"Field '{field}' has unsupported type kind '{kind}'")


class ConfigError(ValueError):
    """The engine configuration file is invalid."""
