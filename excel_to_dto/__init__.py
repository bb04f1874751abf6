"""Excel-to-DTO Generator.

Reads a DTO definition sheet from an Excel workbook and generates Python
dataclass modules from it.

The definition matrix encodes nesting with a ``Layer`` column: class headers
sit on even layers, their fields one layer deeper, and a field's own nested
class two layers deeper, directly beneath the field. Rows with anything in
the ``Delete`` column are ignored. :func:`reconstruct` rebuilds the class
tree from those rows; :func:`generate_dtos` runs the whole pipeline.
"""

from .definition import ClassDefinition, DefinitionGroup, FieldDefinition
from .exceptions import (
    ConfigurationError,
    DefinitionPathError,
    DefinitionSheetError,
    DtoGeneratorError,
    EmptyHierarchyError,
    HierarchyTooDeepError,
    MalformedRecordError,
    MissingItemNameError,
)
from .generator import generate_dtos, load_config
from .items import FieldKind, ItemNameResolver
from .reconstructor import build, reconstruct

__all__ = [
    "ClassDefinition",
    "DefinitionGroup",
    "FieldDefinition",
    "FieldKind",
    "ItemNameResolver",
    "build",
    "reconstruct",
    "generate_dtos",
    "load_config",
    "ConfigurationError",
    "DefinitionPathError",
    "DefinitionSheetError",
    "DtoGeneratorError",
    "EmptyHierarchyError",
    "HierarchyTooDeepError",
    "MalformedRecordError",
    "MissingItemNameError",
]
