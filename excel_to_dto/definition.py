"""
Definition Tree
===============
Ordered groups of class definitions, each owning an ordered list of fields.
Any field may own a nested group of class definitions, to arbitrary depth.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional, Tuple


@dataclass
class FieldDefinition:
    """A single field of a generated class."""
    variable_name: str = ""
    data_type: str = ""
    initial_value: str = ""
    invariant: bool = False
    description: str = ""
    nested: Optional["DefinitionGroup"] = None

    def attach_nested(self, group: "DefinitionGroup"):
        """Attach the nested class group owned by this field. Allowed once."""
        if self.nested is not None:
            raise ValueError(
                f"Field '{self.variable_name}' already owns a nested group"
            )
        self.nested = group

    @property
    def has_nested(self) -> bool:
        return self.nested is not None

    def to_dict(self) -> dict:
        d = {
            "variable_name": self.variable_name,
            "data_type": self.data_type,
            "initial_value": self.initial_value,
            "invariant": self.invariant,
            "description": self.description,
        }
        if self.nested is not None:
            d["nested"] = self.nested.to_dict()
        return d


@dataclass
class ClassDefinition:
    """A class header row together with the fields listed beneath it."""
    name: str = ""
    description: str = ""
    fields: list = field(default_factory=list)  # [FieldDefinition]

    def add_field(self, field_definition: FieldDefinition) -> FieldDefinition:
        self.fields.append(field_definition)
        return field_definition

    @property
    def last_field(self) -> Optional[FieldDefinition]:
        return self.fields[-1] if self.fields else None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "fields": [f.to_dict() for f in self.fields],
        }


@dataclass
class DefinitionGroup:
    """Class definitions found at one nesting level, in source row order."""
    definitions: list = field(default_factory=list)  # [ClassDefinition]

    def add(self, definition: ClassDefinition) -> ClassDefinition:
        self.definitions.append(definition)
        return definition

    def is_empty(self) -> bool:
        return not self.definitions

    def __len__(self):
        return len(self.definitions)

    def __iter__(self) -> Iterator[ClassDefinition]:
        return iter(self.definitions)

    def __getitem__(self, index) -> ClassDefinition:
        return self.definitions[index]

    def walk(self) -> Iterator[Tuple[int, ClassDefinition]]:
        """Yield ``(depth, definition)`` pairs depth-first, parents before children."""
        pending = [(0, d) for d in reversed(self.definitions)]
        while pending:
            depth, definition = pending.pop()
            yield depth, definition
            for f in reversed(definition.fields):
                if f.nested is not None:
                    pending.extend((depth + 1, d) for d in reversed(f.nested.definitions))

    def depth(self) -> int:
        """Number of group levels in this tree (an empty group counts as 1)."""
        deepest = 0
        pending = [(1, self)]
        while pending:
            level, group = pending.pop()
            deepest = max(deepest, level)
            for definition in group.definitions:
                for f in definition.fields:
                    if f.nested is not None:
                        pending.append((level + 1, f.nested))
        return deepest

    def to_dict(self) -> list:
        return [d.to_dict() for d in self.definitions]
