"""Normalize field annotations into one Validation value.

Two sources are merged: the built-in options (``readOnly``, ``deprecated``,
``multipleOf``) and protoc-gen-validate style rules, whose numeric, string, repeated
and enum variants map onto JSON Schema keywords.
"""

from typing import Any

from protodto.model import DtoEnum, Validation
from protodto.schema.models import EnumRules, FieldDecl, NumericRules, RepeatedRules, StringRules

DEPRECATION_NOTICE = "Deprecated: Do not use."

STRING_FORMATS = (
    ("uri", "uri"),
    ("uri_ref", "uri-reference"),
    ("email", "email"),
    ("hostname", "hostname"),
    ("ipv4", "ipv4"),
    ("ipv6", "ipv6"),
    ("uuid", "uuid"),
)


def normalize_validation(field_decl: FieldDecl, enum: DtoEnum | None = None) -> Validation:
    """
    Build the validation constraints of one field.

    Args:
        field_decl: The field declaration with its options
        enum: The enum model of the field's type, if it is an enum

    Returns:
        Validation: The merged constraints
    """
    options = field_decl.options
    values: dict[str, Any] = {
        "read_only": options.read_only,
        "deprecated": options.deprecated,
        "multiple_of": options.multiple_of or None,
    }

    # Every field starts with all values; rules below may narrow them for this field only.
    if enum is not None:
        values["enum_values"] = enum.labels

    rules = options.rules
    if rules is None:
        return Validation(**values)

    if rules.message is not None and rules.message.required:
        values["required"] = True

    numeric = rules.numeric()
    if numeric is not None:
        values.update(numeric_bounds(numeric))

    if rules.string is not None:
        values.update(string_shape(rules.string))

    if rules.repeated is not None:
        values.update(array_shape(rules.repeated))

    if enum is not None:
        values["enum_values"] = allowed_enum_labels(enum, rules.enum)

    return Validation(**values)


def numeric_bounds(rules: NumericRules) -> dict[str, float]:
    """Only bounds that are set are returned, zero included."""
    bounds: dict[str, float] = {}
    if rules.const is not None:
        bounds["minimum"] = rules.const
        bounds["maximum"] = rules.const
    if rules.gte is not None:
        bounds["minimum"] = rules.gte
    if rules.gt is not None:
        bounds["exclusive_minimum"] = rules.gt
    if rules.lte is not None:
        bounds["maximum"] = rules.lte
    if rules.lt is not None:
        bounds["exclusive_maximum"] = rules.lt
    return bounds


def string_shape(rules: StringRules) -> dict[str, Any]:
    shape: dict[str, Any] = {}
    if rules.min_len is not None:
        shape["min_length"] = rules.min_len
    if rules.max_len is not None:
        shape["max_length"] = rules.max_len
    if rules.pattern is not None:
        shape["pattern"] = rules.pattern
    for attribute, format_name in STRING_FORMATS:
        if getattr(rules, attribute):
            shape["format"] = format_name
    return shape


def array_shape(rules: RepeatedRules) -> dict[str, Any]:
    shape: dict[str, Any] = {}
    if rules.min_items is not None:
        shape["min_items"] = rules.min_items
    if rules.max_items is not None:
        shape["max_items"] = rules.max_items
    if rules.unique is not None:
        shape["unique"] = rules.unique
    return shape


def allowed_enum_labels(enum: DtoEnum, rules: EnumRules | None) -> list[str]:
    """Labels of the enum values a field accepts.

    Starts from the enum's values, which already lack excluded ones, keeps only the
    ``in`` list when given and drops every ``not_in`` number. The enum is not modified.
    """
    if rules is None:
        return enum.labels

    allowed = set(rules.in_)
    rejected = set(rules.not_in)
    return [
        value.label
        for value in enum.values
        if (not allowed or value.value in allowed) and value.value not in rejected
    ]


def deprecated_comment(comment: str) -> str:
    return f"{DEPRECATION_NOTICE} {comment}".strip()
