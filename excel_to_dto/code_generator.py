"""
Code Generator Module
=====================
Renders a reconstructed definition tree into Python modules of dataclasses.
One module (resource) is produced per top-level class; classes owned by its
fields are emitted in the same module, ahead of the classes that use them.
"""

import keyword
import logging
import re
from dataclasses import dataclass
from typing import List

from .collector import DtoMeta
from .definition import ClassDefinition, DefinitionGroup, FieldDefinition

logger = logging.getLogger(__name__)

INDENT = "    "

# List, dict and set displays or constructor calls; dataclasses reject these as defaults.
MUTABLE_DEFAULT = re.compile(r"^(\[.*\]|\{.*\}|(list|dict|set)\(.*\))$", re.DOTALL)


@dataclass
class DtoResource:
    """Source text of one generated module and where it belongs."""
    package_name: str
    resource_name: str
    resource: str

    @property
    def file_name(self) -> str:
        return f"{self.resource_name}.py"


def to_snake_case(name: str) -> str:
    """``UserAddress`` -> ``user_address``; non-identifier characters become ``_``."""
    s = re.sub(r'(.)([A-Z][a-z]+)', r'\1_\2', name.strip())
    s = re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', s)
    s = re.sub(r'\W+', '_', s).strip('_').lower()
    if s and s[0].isdigit():
        s = f"_{s}"
    return s


def _docstring(text: str, indent: str = "") -> List[str]:
    text = text.replace("\\", "\\\\")
    if text.endswith('"'):
        text = text[:-1] + '\\"'
    text = text.replace('"""', '\\"\\"\\"')
    lines = text.splitlines() or [""]
    if len(lines) == 1:
        return [f'{indent}"""{lines[0]}"""']
    out = [f'{indent}"""{lines[0]}']
    out.extend(f"{indent}{line}" if line else "" for line in lines[1:])
    out.append(f'{indent}"""')
    return out


def is_class_name(name: str) -> bool:
    """True when *name* can be emitted as a Python class name."""
    return bool(name) and name.isidentifier() and not keyword.iskeyword(name)


def field_type(f: FieldDefinition) -> str:
    """Annotation for a field: its data type, else its nested class, else ``Any``."""
    if f.data_type:
        annotation = f.data_type
    elif f.nested is not None and len(f.nested) > 0 and is_class_name(f.nested[0].name):
        annotation = f.nested[0].name
    else:
        annotation = "Any"
    if f.invariant:
        annotation = f"Final[{annotation}]"
    return annotation


def default_expression(initial_value: str) -> str:
    """Default for a field; mutable values are wrapped in a ``default_factory``."""
    value = initial_value.strip()
    if MUTABLE_DEFAULT.match(value):
        return f"field(default_factory=lambda: {value})"
    return initial_value


def render_field(f: FieldDefinition) -> str:
    line = f"{INDENT}{f.variable_name}: {field_type(f)}"
    if f.initial_value:
        line += f" = {default_expression(f.initial_value)}"
    if f.description:
        line += f"  # {' '.join(f.description.split())}"
    return line


def render_class(definition: ClassDefinition) -> List[str]:
    lines = ["@dataclass(kw_only=True)", f"class {definition.name}:"]
    if definition.description:
        lines.extend(_docstring(definition.description, INDENT))
        if definition.fields:
            lines.append("")
    for f in definition.fields:
        lines.append(render_field(f))
    if not definition.description and not definition.fields:
        lines.append(f"{INDENT}pass")
    return lines


def _classes_in_order(definition: ClassDefinition) -> List[ClassDefinition]:
    """Nested classes before their owners, each class name once."""
    ordered = []
    seen = set()

    def visit(d: ClassDefinition):
        for f in d.fields:
            if f.nested is not None:
                for child in f.nested:
                    visit(child)
        if not is_class_name(d.name):
            logger.warning(f"  Skipping class with invalid name '{d.name}'")
            return
        if d.name in seen:
            logger.warning(f"  Class '{d.name}' is defined more than once; "
                           f"keeping the first definition")
            return
        seen.add(d.name)
        ordered.append(d)

    visit(definition)
    return ordered


def _module_header(meta: DtoMeta, definition: ClassDefinition) -> List[str]:
    summary = definition.description or meta.class_description or definition.name
    details = [
        ("Class", meta.class_name),
        ("Version", meta.version),
        ("Creator", meta.creator),
        ("Created", meta.creation_time),
        ("Updated", meta.update_time),
    ]
    text = [summary, ""]
    text.extend(f"{label}: {value}" for label, value in details if value)
    if text[-1] != "":
        text.append("")
    text.append("Generated from a DTO definition sheet. Do not edit by hand.")
    return _docstring("\n".join(text))


def render_module(meta: DtoMeta, definition: ClassDefinition) -> str:
    """Render the module for one top-level class."""
    lines = _module_header(meta, definition)
    lines.append("")
    lines.append("from dataclasses import dataclass, field")
    lines.append("from typing import Any, Final")
    for d in _classes_in_order(definition):
        lines.append("")
        lines.append("")
        lines.extend(render_class(d))
    lines.append("")
    return "\n".join(lines)


def create_resources(meta: DtoMeta, group: DefinitionGroup) -> List[DtoResource]:
    """Build one resource per top-level class of *group*; classes without a valid name are skipped."""
    resources = []
    for definition in group:
        if not is_class_name(definition.name):
            logger.warning(f"  Skipping top-level class with invalid name '{definition.name}'")
            continue
        resource_name = to_snake_case(definition.name) or "dto"
        resource = DtoResource(
            package_name=meta.package_name,
            resource_name=resource_name,
            resource=render_module(meta, definition),
        )
        logger.info(f"  Rendered '{definition.name}' -> {resource.file_name} "
                    f"({len(definition.fields)} fields)")
        resources.append(resource)
    return resources
