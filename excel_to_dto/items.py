"""
Item Name Resolver
==================
Maps each semantic item kind (layer, delete flag, variable name, ...) to the
label used for it in the current definition workbook. The same reconstruction
logic can then run against sheets whose column headers differ.
"""

import logging
from enum import Enum
from typing import Mapping, Optional

from .exceptions import ConfigurationError, MissingItemNameError

logger = logging.getLogger(__name__)


class FieldKind(Enum):
    """Closed set of items the generator reads from a definition workbook."""
    # Columns of the definition matrix
    LAYER = "layer"
    LOGICAL_DELETE = "logical_delete"
    VARIABLE_NAME = "variable_name"
    DATA_TYPE = "data_type"
    INITIAL_VALUE = "initial_value"
    INVARIANT = "invariant"
    DESCRIPTION = "description"
    # Labelled cells above the matrix
    CLASS_NAME = "class_name"
    CLASS_DESCRIPTION = "class_description"
    PACKAGE_NAME = "package_name"
    VERSION = "version"
    CREATOR = "creator"
    CREATION_TIME = "creation_time"
    UPDATE_TIME = "update_time"


# Kinds the hierarchy reconstructor reads from every record
RECORD_KINDS = (
    FieldKind.LAYER,
    FieldKind.LOGICAL_DELETE,
    FieldKind.VARIABLE_NAME,
    FieldKind.DATA_TYPE,
    FieldKind.INITIAL_VALUE,
    FieldKind.INVARIANT,
    FieldKind.DESCRIPTION,
)

# Kinds read from single labelled cells
META_KINDS = (
    FieldKind.CLASS_NAME,
    FieldKind.CLASS_DESCRIPTION,
    FieldKind.PACKAGE_NAME,
    FieldKind.VERSION,
    FieldKind.CREATOR,
    FieldKind.CREATION_TIME,
    FieldKind.UPDATE_TIME,
)

DEFAULT_ITEM_NAMES = {
    FieldKind.LAYER: "Layer",
    FieldKind.LOGICAL_DELETE: "Delete",
    FieldKind.VARIABLE_NAME: "Variable Name",
    FieldKind.DATA_TYPE: "Data Type",
    FieldKind.INITIAL_VALUE: "Initial Value",
    FieldKind.INVARIANT: "Invariant",
    FieldKind.DESCRIPTION: "Description",
    FieldKind.CLASS_NAME: "Class Name",
    FieldKind.CLASS_DESCRIPTION: "Class Description",
    FieldKind.PACKAGE_NAME: "Package",
    FieldKind.VERSION: "Version",
    FieldKind.CREATOR: "Creator",
    FieldKind.CREATION_TIME: "Created",
    FieldKind.UPDATE_TIME: "Updated",
}


class ItemNameResolver:
    """Static lookup of ``FieldKind`` -> label, loaded once per document."""

    def __init__(self, item_names: Mapping[FieldKind, str]):
        self._item_names = dict(item_names)

    @classmethod
    def from_config(cls, item_names: Optional[Mapping[str, str]] = None,
                    use_defaults: bool = True) -> "ItemNameResolver":
        """
        Build a resolver from the ``item_names`` section of the config.

        Keys are ``FieldKind`` names (case-insensitive). Entries given here
        override the built-in defaults unless *use_defaults* is False.
        """
        resolved = dict(DEFAULT_ITEM_NAMES) if use_defaults else {}
        for key, label in (item_names or {}).items():
            try:
                kind = FieldKind[str(key).strip().upper()]
            except KeyError:
                raise ConfigurationError(f"Unknown item name key: '{key}'") from None
            resolved[kind] = label
        names = {k.name: v for k, v in resolved.items()}
        logger.debug(f"Item names: {names}")
        return cls(resolved)

    def resolve(self, kind: FieldKind) -> str:
        """Return the label configured for *kind*, or raise MissingItemNameError."""
        label = self._item_names.get(kind)
        if label is None or str(label) == "":
            raise MissingItemNameError(kind)
        return str(label)

    def require(self, kinds) -> dict:
        """Resolve every kind in *kinds* up front, failing on the first gap."""
        return {kind: self.resolve(kind) for kind in kinds}

    def __repr__(self):
        return f"ItemNameResolver({len(self._item_names)} items)"
