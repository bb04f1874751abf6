"""
Collects everything the code generator needs from one definition sheet: the
document metadata written in labelled cells and the class hierarchy written
in the definition matrix.
"""

import logging
from dataclasses import dataclass, asdict

from .definition import DefinitionGroup
from .items import FieldKind, ItemNameResolver, META_KINDS
from .reconstructor import DEFAULT_MAX_DEPTH, reconstruct
from .sheet_reader import read_labelled_value, read_matrix_at

logger = logging.getLogger(__name__)


@dataclass
class DtoMeta:
    """Document-level information printed in the header of generated modules."""
    class_name: str = ""
    class_description: str = ""
    package_name: str = ""
    version: str = ""
    creator: str = ""
    creation_time: str = ""
    update_time: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


_META_ATTRIBUTES = {kind: kind.value for kind in META_KINDS}


def collect_meta(ws, resolver: ItemNameResolver) -> DtoMeta:
    """Read every metadata item from its labelled cell; absent labels read as ``""``."""
    values = {}
    for kind in META_KINDS:
        label = resolver.resolve(kind)
        value = read_labelled_value(ws, label)
        if value is None:
            logger.warning(f"  Label '{label}' ({kind.name}) not found on sheet '{ws.title}'")
            value = ""
        values[_META_ATTRIBUTES[kind]] = value
    meta = DtoMeta(**values)
    logger.info(f"  Metadata: {meta.to_dict()}")
    return meta


def collect_definitions(ws, resolver: ItemNameResolver,
                        max_depth: int = DEFAULT_MAX_DEPTH) -> DefinitionGroup:
    """Read the definition matrix, anchored at the logical-delete header, and rebuild its tree."""
    anchor = resolver.resolve(FieldKind.LOGICAL_DELETE)
    records = read_matrix_at(ws, anchor)
    logger.debug(f"Matrix records: {records}")
    return reconstruct(records, resolver, max_depth=max_depth)
