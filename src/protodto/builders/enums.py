from collections.abc import Iterable, Mapping

from protodto import log
from protodto.model import DtoEnum, DtoEnumValue
from protodto.naming import COMMON_INITIALISMS, go_case, proto_go_name
from protodto.schema.comments import StructuralPath
from protodto.schema.models import EnumDecl


def build_enum(
    decl: EnumDecl,
    scope: tuple[str, ...],
    path: StructuralPath,
    comments: Mapping[StructuralPath, str],
    initialisms: Iterable[str] = COMMON_INITIALISMS,
) -> DtoEnum:
    """
    Build the flattened model of one enum declaration.

    Values annotated with ``exclude`` are dropped here, once, for every field that uses
    the enum. Declaration order is kept and aliased numbers are not merged.

    Args:
        decl: The enum declaration
        scope: Names of the enclosing messages, outermost first
        path: Structural path of the declaration
        comments: Comment table of the declaring unit
        initialisms: Initialisms to upper case in generated names

    Returns:
        DtoEnum: The enum model
    """
    values = []
    for value in decl.value:
        if value.options.exclude:
            log.debug(f"Excluding enum value {decl.name}.{value.name}")
            continue
        values.append(
            DtoEnumValue(
                name=go_case(value.name, initialisms=initialisms),
                label=value.name,
                value=value.number,
            )
        )

    return DtoEnum(
        name=go_case(*scope, decl.name, initialisms=initialisms),
        proto_go_name=proto_go_name(*scope, decl.name),
        values=values,
        comment=comments.get(path, ""),
    )
