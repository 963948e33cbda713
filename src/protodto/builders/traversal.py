from pathlib import PurePosixPath

from protodto import log
from protodto.builders.types import TypeMapper, UnitContext
from protodto.builders.validation import deprecated_comment, normalize_validation
from protodto.config import EngineConfig
from protodto.exceptions import SchemaError
from protodto.model import DtoEnum, DtoField, DtoMessage, OutputUnit
from protodto.naming import go_case, json_name, proto_go_field_name, proto_go_name
from protodto.registry import EnumEntry, TypeRegistry, WorkItem, walk_unit
from protodto.schema.comments import MESSAGE_FIELD, StructuralPath
from protodto.schema.models import EnumDecl, FieldDecl, MessageDecl, SchemaUnit

# Mutually exclusive fields are checked by generated request validation code.
ONE_OF_IMPORTS = ("net/http", "reflect", "strings", "github.com/istreamlabs/huma")


def output_name(path: str, suffix: str) -> str:
    """Output identifier for a unit, e.g. ``api/v1/user.proto`` -> ``api/v1/user.dto.go``."""
    return PurePosixPath(path).with_suffix(suffix).as_posix()


def one_of_note(json_names: list[str]) -> str:
    quoted = "', '".join(json_names)
    return f"Only one of ['{quoted}'] may be set."


class FlatteningEngine:
    """
    Build the flattened output model of requested schema units.

    Declarations are visited children first, so nested enums and messages are modeled
    before the message that declares them. Only public fields are kept unless the
    configuration makes every field public.
    """

    def __init__(self, registry: TypeRegistry, config: EngineConfig | None = None):
        self.registry = registry
        self.config = config or EngineConfig()
        self.mapper = TypeMapper(registry)

    def build_unit(self, unit: SchemaUnit) -> OutputUnit | None:
        """
        Build the output model of one unit.

        Args:
            unit: A unit already registered in the registry

        Returns:
            OutputUnit | None: The model, or None when the unit has no messages or enums
        """
        context = UnitContext(unit)
        if context.import_path:
            context.require(context.import_path)

        messages: list[DtoMessage] = []
        enums: list[DtoEnum] = []
        emitted: set[str] = set()

        for item in walk_unit(unit):
            if isinstance(item.decl, EnumDecl):
                enum = self._registered_enum(item)
                if enum.name in emitted:
                    log.debug(f"Skipping duplicate enum {enum.name} in {unit.name}")
                    continue
                emitted.add(enum.name)
                enums.append(enum)
            elif item.decl.is_map_entry:
                continue
            else:
                message = self._build_message(context, item, item.decl)
                if message.name in emitted:
                    log.debug(f"Skipping duplicate message {message.name} in {unit.name}")
                    continue
                emitted.add(message.name)
                messages.append(message)

        if not messages and not enums:
            return None

        log.debug(f"Built {len(messages)} messages and {len(enums)} enums for {unit.name}")
        return OutputUnit(
            name=output_name(unit.name, self.config.output_suffix),
            source=unit.name,
            package_name=context.namespace,
            proto_go_import=context.import_path,
            imports=sorted(context.imports),
            messages=messages,
            enums=enums,
        )

    def _registered_enum(self, item: WorkItem) -> DtoEnum:
        entry = self.registry.resolve(item.type_ref)
        if not isinstance(entry, EnumEntry):
            raise SchemaError(f"'{item.type_ref}' is registered as a message, not an enum")
        return entry.model

    def _build_message(self, context: UnitContext, item: WorkItem, decl: MessageDecl) -> DtoMessage:
        fields: list[DtoField] = []
        groups: dict[str, list[int]] = {}

        for index, field_decl in enumerate(decl.field):
            if not (field_decl.options.public or self.config.all_public):
                continue

            field = self._build_field(context, decl, (*item.path, MESSAGE_FIELD, index), field_decl)
            if field.one_of:
                context.require(*ONE_OF_IMPORTS)
                groups.setdefault(field.one_of, []).append(len(fields))
            fields.append(field)

        # Only once every member of a group is known can each one list its siblings.
        for members in groups.values():
            note = one_of_note([fields[index].json_name for index in members])
            for index in members:
                comment = f"{fields[index].comment} {note}".lstrip()
                fields[index] = fields[index].model_copy(update={"comment": comment})

        return DtoMessage(
            name=go_case(*item.names, initialisms=self.registry.initialisms),
            proto_go_name=proto_go_name(*item.names),
            fields=fields,
            one_ofs={group: [fields[index] for index in members] for group, members in groups.items()},
            comment=context.unit.comment_for(item.path),
        )

    def _build_field(
        self, context: UnitContext, message: MessageDecl, path: StructuralPath, field_decl: FieldDecl
    ) -> DtoField:
        options = field_decl.options

        name = go_case(field_decl.name, initialisms=self.registry.initialisms)
        serialized = json_name(field_decl.json_name or field_decl.name)
        if options.name:
            name = options.name
            serialized = json_name(options.name)
        if options.json_name:
            serialized = options.json_name

        mapping = self.mapper.map_type(context, field_decl)

        one_of = ""
        # Synthetic one-ofs only mark proto3 optional presence.
        if field_decl.oneof_index is not None and not field_decl.proto3_optional:
            if field_decl.oneof_index >= len(message.oneof_decl):
                raise SchemaError(f"Field '{field_decl.name}' refers to missing one-of {field_decl.oneof_index}")
            one_of = proto_go_field_name(message.oneof_decl[field_decl.oneof_index].name)

        validation = normalize_validation(field_decl, mapping.enum)
        comment = context.unit.comment_for(path)
        if validation.deprecated:
            comment = deprecated_comment(comment)

        return DtoField(
            name=name,
            proto_go_name=proto_go_field_name(field_decl.name),
            json_name=serialized,
            go_type=mapping.go_type,
            proto_go_type=mapping.proto_go_type,
            is_map=mapping.is_map,
            is_primitive=mapping.is_primitive,
            is_repeated=field_decl.is_repeated and not mapping.is_map,
            one_of=one_of,
            comment=comment,
            example=options.example,
            enum=mapping.enum,
            validation=validation,
        )
