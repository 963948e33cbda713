from .loader import load_request, load_request_from_dict
from .models import (
    EnumDecl,
    FieldDecl,
    FieldKind,
    FieldLabel,
    MessageDecl,
    SchemaRequest,
    SchemaUnit,
)

__all__ = [
    "EnumDecl",
    "FieldDecl",
    "FieldKind",
    "FieldLabel",
    "MessageDecl",
    "SchemaRequest",
    "SchemaUnit",
    "load_request",
    "load_request_from_dict",
]
