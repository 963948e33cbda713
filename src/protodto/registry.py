"""Run-scoped index of every message and enum in a schema graph.

Both passes of a run consume the same post-order walk: registration indexes every
declaration of every unit, and the flattening engine later builds models for the
requested units only.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from protodto import log
from protodto.builders.enums import build_enum
from protodto.exceptions import DuplicateTypeError, UnresolvedTypeError
from protodto.model import DtoEnum
from protodto.naming import COMMON_INITIALISMS, proto_go_name
from protodto.schema.comments import (
    FILE_ENUM_TYPE,
    FILE_MESSAGE_TYPE,
    MESSAGE_ENUM_TYPE,
    MESSAGE_NESTED_TYPE,
    StructuralPath,
)
from protodto.schema.models import EnumDecl, MessageDecl, SchemaUnit


def type_ref_for(package: str, names: Iterable[str]) -> str:
    """Fully-qualified name with a leading dot, e.g. ``.pkg.Outer.Inner``."""
    prefix = f".{package}" if package else ""
    return prefix + "".join(f".{name}" for name in names)


@dataclass(frozen=True)
class WorkItem:
    """One declaration found by the walk together with where it lives."""

    type_ref: str
    scope: tuple[str, ...]
    path: StructuralPath
    decl: MessageDecl | EnumDecl

    @property
    def names(self) -> tuple[str, ...]:
        return (*self.scope, self.decl.name)


def walk_unit(unit: SchemaUnit) -> Iterator[WorkItem]:
    """Yield every enum and message of a unit, children before parents.

    Top-level enums come first. Each message is preceded by its nested enums and its
    nested messages (recursively), so anything a message's fields may reference locally
    has already been seen.
    """
    for index, enum in enumerate(unit.enum_type):
        yield WorkItem(type_ref_for(unit.package, [enum.name]), (), (FILE_ENUM_TYPE, index), enum)
    for index, message in enumerate(unit.message_type):
        yield from _walk_message(unit.package, (), (FILE_MESSAGE_TYPE, index), message)


def _walk_message(
    package: str, scope: tuple[str, ...], path: StructuralPath, message: MessageDecl
) -> Iterator[WorkItem]:
    inner_scope = (*scope, message.name)
    for index, enum in enumerate(message.enum_type):
        yield WorkItem(
            type_ref_for(package, (*inner_scope, enum.name)), inner_scope, (*path, MESSAGE_ENUM_TYPE, index), enum
        )
    for index, nested in enumerate(message.nested_type):
        yield from _walk_message(package, inner_scope, (*path, MESSAGE_NESTED_TYPE, index), nested)
    yield WorkItem(type_ref_for(package, inner_scope), scope, path, message)


@dataclass(frozen=True)
class TypeOrigin:
    """The unit a type was declared in."""

    unit: str
    package: str
    namespace: str
    import_path: str

    @classmethod
    def of(cls, unit: SchemaUnit) -> "TypeOrigin":
        return cls(unit.name, unit.package, unit.go_package_name, unit.go_import_path)


@dataclass(frozen=True)
class MessageEntry:
    type_ref: str
    scope: tuple[str, ...]
    decl: MessageDecl
    origin: TypeOrigin

    @property
    def proto_go_name(self) -> str:
        return proto_go_name(*self.scope, self.decl.name)


@dataclass(frozen=True)
class EnumEntry:
    type_ref: str
    scope: tuple[str, ...]
    decl: EnumDecl
    origin: TypeOrigin
    model: DtoEnum

    @property
    def proto_go_name(self) -> str:
        return self.model.proto_go_name


RegistryEntry = MessageEntry | EnumEntry


class TypeRegistry:
    """
    Index from fully-qualified type name to declaration.

    Enum models are built when registered, so any field anywhere in the graph can use
    the filtered value list. Messages are only cached as declarations. Entries are never
    changed once registered; one registry belongs to exactly one run.
    """

    def __init__(self, initialisms: Iterable[str] = COMMON_INITIALISMS):
        self.initialisms = frozenset(initialisms)
        self._entries: dict[str, RegistryEntry] = {}

    @classmethod
    def from_units(cls, units: Iterable[SchemaUnit], initialisms: Iterable[str] = COMMON_INITIALISMS) -> "TypeRegistry":
        """Register every unit. This completes before any model is built."""
        registry = cls(initialisms)
        unit_count = 0
        for unit in units:
            registry.register(unit)
            unit_count += 1
        log.info(f"Registered {len(registry)} types from {unit_count} schema units")
        return registry

    def register(self, unit: SchemaUnit) -> None:
        """Register all messages and enums of a unit, nested ones included.

        Raises:
            DuplicateTypeError: If a fully-qualified name is already registered.
        """
        origin = TypeOrigin.of(unit)
        count = 0
        for item in walk_unit(unit):
            if item.type_ref in self._entries:
                raise DuplicateTypeError(item.type_ref, unit.name)

            entry: RegistryEntry
            if isinstance(item.decl, EnumDecl):
                model = build_enum(item.decl, item.scope, item.path, unit.comments, self.initialisms)
                entry = EnumEntry(item.type_ref, item.scope, item.decl, origin, model)
            else:
                entry = MessageEntry(item.type_ref, item.scope, item.decl, origin)

            self._entries[item.type_ref] = entry
            count += 1

        log.debug(f"Registered {count} types from {unit.name}")

    def get(self, type_ref: str) -> RegistryEntry | None:
        return self._entries.get(type_ref)

    def resolve(self, type_ref: str, field: str | None = None) -> RegistryEntry:
        """Look up a type.

        Raises:
            UnresolvedTypeError: If the type was never registered.
        """
        entry = self._entries.get(type_ref)
        if entry is None:
            raise UnresolvedTypeError(type_ref, field)
        return entry

    def entries(self) -> list[RegistryEntry]:
        """All entries in registration order."""
        return list(self._entries.values())

    def __contains__(self, type_ref: object) -> bool:
        return type_ref in self._entries

    def __len__(self) -> int:
        return len(self._entries)
