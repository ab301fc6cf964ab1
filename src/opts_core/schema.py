"""FieldDef and StructDef: the shape a decode pass fills in."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from .errors import SchemaError

SCALAR_KINDS = frozenset({"str", "bool", "int", "uint", "size", "enum"})


@dataclass
class FieldDef:
    name: str
    kind: Union[str, "StructDef"]  # "str"|"bool"|"int"|"uint"|"size"|"enum"|StructDef
    choices: list[str] = field(default_factory=list)  # for enum
    multi: bool = False  # repeated option decoded as a list
    optional: bool = False

    @property
    def is_struct(self) -> bool:
        return isinstance(self.kind, StructDef)


@dataclass
class StructDef:
    name: str  # "" if anonymous
    fields: list[FieldDef]

    def validate(self) -> None:
        """Reject definitions the options core cannot decode.

        Lists hold scalars only and nested structs share the parent's flat
        namespace, so a field name may appear only once across the tree.
        """
        self._validate(set())

    def _validate(self, seen: set[str]) -> None:
        for fd in self.fields:
            if fd.is_struct:
                if fd.multi:
                    raise SchemaError(f"{self.name or '<struct>'}.{fd.name}: lists of structs are not supported")
                fd.kind._validate(seen)
                continue
            if fd.kind not in SCALAR_KINDS:
                raise SchemaError(f"{self.name or '<struct>'}.{fd.name}: unknown kind {fd.kind!r}")
            if fd.kind == "enum" and not fd.choices:
                raise SchemaError(f"{self.name or '<struct>'}.{fd.name}: enum without choices")
            if fd.name in seen:
                raise SchemaError(f"duplicate option name {fd.name!r}")
            seen.add(fd.name)
