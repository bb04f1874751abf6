"""
Exceptions raised while reading a DTO definition workbook and rebuilding its
class hierarchy.
"""


class DtoGeneratorError(Exception):
    """Base class for all errors raised by the generator."""


class ConfigurationError(DtoGeneratorError):
    """The configuration file could not be used."""


class MissingItemNameError(ConfigurationError):
    """No column label is configured for a required item kind."""

    def __init__(self, kind):
        self.kind = kind
        super().__init__(f"No item name configured for '{kind.name}'")


class MalformedRecordError(DtoGeneratorError):
    """A definition row cannot be interpreted (e.g. its layer is not an integer)."""

    def __init__(self, message, index=None, value=None):
        self.index = index
        self.value = value
        if index is not None:
            message = f"Row {index}: {message}"
        super().__init__(message)


class EmptyHierarchyError(DtoGeneratorError):
    """The definition sheet produced no class definitions."""


class HierarchyTooDeepError(DtoGeneratorError):
    """Class nesting exceeded the configured maximum depth."""

    def __init__(self, max_depth, index):
        self.max_depth = max_depth
        self.index = index
        super().__init__(
            f"Row {index}: nesting exceeds the maximum depth of {max_depth}"
        )


class DefinitionSheetError(DtoGeneratorError):
    """The definition sheet or its header cell could not be located."""


class DefinitionPathError(DtoGeneratorError, ValueError):
    """A definition file path is required but was blank."""
