"""Source comment lookup by structural path.

Protobuf addresses every declaration with a path of descriptor field numbers and list
indexes, e.g. ``[4, 2, 2, 1]`` is the second field of the third top-level message. The
compiler stores comments per path; this module turns that list into a flat mapping.
"""

import re
from collections.abc import Iterable
from typing import Protocol

SPACE_PATTERN = re.compile(r"\s+")

# FileDescriptorProto field numbers
FILE_MESSAGE_TYPE = 4
FILE_ENUM_TYPE = 5

# DescriptorProto field numbers
MESSAGE_FIELD = 2
MESSAGE_NESTED_TYPE = 3
MESSAGE_ENUM_TYPE = 4

StructuralPath = tuple[int, ...]


class CommentLocation(Protocol):
    path: list[int]
    leading_comments: str | None
    trailing_comments: str | None


def clean_comment(text: str) -> str:
    """Normalize a raw comment so it can be embedded in struct tags and docs.

    Double quotes and backticks become single quotes, runs of whitespace collapse to one
    space and the result is stripped.
    """
    comment = text.replace('"', "'").replace("`", "'")
    comment = SPACE_PATTERN.sub(" ", comment)
    return comment.strip()


def build_comment_table(locations: Iterable[CommentLocation]) -> dict[StructuralPath, str]:
    """Map each structural path to its cleaned comment.

    Leading comments win; a trailing comment is used only when a declaration has no
    leading one. The first location for a path is kept.
    """
    table: dict[StructuralPath, str] = {}
    for location in locations:
        raw = location.leading_comments or location.trailing_comments
        if not raw:
            continue
        path = tuple(location.path)
        if path in table:
            continue
        comment = clean_comment(raw)
        if comment:
            table[path] = comment
    return table
