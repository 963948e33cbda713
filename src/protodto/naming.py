"""Identifier casing for generated Go types.

Target names are camel cased with Go's common initialisms capitalized (``user_id`` ->
``UserID``). Field names of the protoc-gen-go bindings and JSON names use ``caseconverter``.
"""

import re
from collections.abc import Iterable

from caseconverter import pascalcase, snakecase

# Initialisms recognized by golint.
COMMON_INITIALISMS = frozenset(
    {
        "ACL",
        "API",
        "ASCII",
        "CPU",
        "CSS",
        "DNS",
        "EOF",
        "GUID",
        "HTML",
        "HTTP",
        "HTTPS",
        "ID",
        "IP",
        "JSON",
        "LHS",
        "QPS",
        "RAM",
        "RHS",
        "RPC",
        "SLA",
        "SMTP",
        "SQL",
        "SSH",
        "TCP",
        "TLS",
        "TTL",
        "UDP",
        "UI",
        "UID",
        "UUID",
        "URI",
        "URL",
        "UTF8",
        "VM",
        "XML",
        "XMPP",
        "XSRF",
        "XSS",
    }
)

SEPARATOR_PATTERN = re.compile(r"[^0-9A-Za-z]+")
# Acronym runs, capitalized or lower words (with trailing digits), bare digit runs.
WORD_PATTERN = re.compile(r"[A-Z]+(?![a-z])\d*|[A-Z]?[a-z]+\d*|\d+")


def split_words(*parts: str) -> list[str]:
    """Split names on separators and case transitions.

    >>> split_words("HTTPServer", "user_id")
    ['HTTP', 'Server', 'user', 'id']
    """
    words: list[str] = []
    for part in parts:
        for chunk in SEPARATOR_PATTERN.split(part):
            words.extend(WORD_PATTERN.findall(chunk))
    return words


def go_case(*parts: str, initialisms: Iterable[str] = COMMON_INITIALISMS) -> str:
    """Join name parts into one exported Go identifier.

    Each word is lowercased and then capitalized, except known initialisms which are
    fully upper cased.

    >>> go_case("Outer", "user_id")
    'OuterUserID'
    """
    known = initialisms if isinstance(initialisms, frozenset | set) else frozenset(initialisms)
    result = []
    for word in split_words(*parts):
        lowered = word.lower()
        if lowered.upper() in known:
            result.append(lowered.upper())
        else:
            result.append(lowered[:1].upper() + lowered[1:])
    return "".join(result)


def proto_go_name(*parts: str) -> str:
    """Name protoc-gen-go gives a (nested) message or enum, e.g. ``Outer_Inner``.

    Declared casing is kept, only the first character of each part is upper cased:
    ``HTTPServer`` stays ``HTTPServer`` and an enum ``STATUS`` stays ``STATUS``.
    """
    return "_".join(part[:1].upper() + part[1:] for part in parts)


def proto_go_field_name(name: str) -> str:
    """Name protoc-gen-go gives a field or one-of, e.g. ``user_id`` -> ``UserId``."""
    return str(pascalcase(name))


def json_name(name: str) -> str:
    """Snake-cased serialized name."""
    return str(snakecase(name))
