"""
Hierarchy Reconstructor
=======================
Rebuilds the class/field tree from the flat, ordered rows of a definition
sheet. Nesting is encoded by an integer layer on every row:

    layer 0  class header
    layer 1    field of that class
    layer 2      header of the class owned by the field above
    layer 3        field of the nested class
    ...

Each nesting level is walked with its own frame on an explicit stack, so the
depth of a document never turns into Python recursion depth.
"""

import logging
import re
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence, Tuple

from .definition import ClassDefinition, DefinitionGroup, FieldDefinition
from .exceptions import (
    EmptyHierarchyError,
    HierarchyTooDeepError,
    MalformedRecordError,
)
from .items import FieldKind, ItemNameResolver, RECORD_KINDS

logger = logging.getLogger(__name__)

ROOT_START_INDEX = 0
ROOT_BASE_LAYER = 1
DEFAULT_MAX_DEPTH = 32

_INTEGER_REGEX = re.compile(r'[+-]?[0-9]+')


def parse_layer(value, index: Optional[int] = None) -> int:
    """Parse a layer cell strictly: an optional sign and ASCII digits, nothing else."""
    if value is None or not _INTEGER_REGEX.fullmatch(str(value)):
        raise MalformedRecordError(
            f"Layer value {value!r} is not an integer", index=index, value=value
        )
    layer = int(value)
    if layer < 0:
        raise MalformedRecordError(
            f"Layer value {value!r} is negative", index=index, value=value
        )
    return layer


def to_flag(value) -> bool:
    """A flag cell is set when it holds anything at all. No trimming."""
    return value is not None and value != ""


def _text(record: Mapping[str, str], label: str) -> str:
    value = record.get(label)
    return "" if value is None else str(value)


def _read_class(record, labels) -> ClassDefinition:
    return ClassDefinition(
        name=_text(record, labels[FieldKind.VARIABLE_NAME]),
        description=_text(record, labels[FieldKind.DESCRIPTION]),
    )


def _read_field(record, labels) -> FieldDefinition:
    return FieldDefinition(
        variable_name=_text(record, labels[FieldKind.VARIABLE_NAME]),
        data_type=_text(record, labels[FieldKind.DATA_TYPE]),
        initial_value=_text(record, labels[FieldKind.INITIAL_VALUE]),
        invariant=to_flag(record.get(labels[FieldKind.INVARIANT])),
        description=_text(record, labels[FieldKind.DESCRIPTION]),
    )


@dataclass
class _Frame:
    """State of one nesting level while it is being walked."""
    start_index: int
    base_layer: int
    group: DefinitionGroup
    owner: Optional[FieldDefinition] = None  # field the group is attached to
    current: Optional[ClassDefinition] = None


def build(
    records: Sequence[Mapping[str, str]],
    resolver: ItemNameResolver,
    start_index: int = ROOT_START_INDEX,
    base_layer: int = ROOT_BASE_LAYER,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Tuple[DefinitionGroup, int]:
    """
    Reconstruct the sibling class definitions of one nesting level.

    Header rows of the level sit at ``base_layer - 1`` and their fields at
    ``base_layer``. Walking starts at ``records[start_index]`` and stops at the
    end of the records or at the first row belonging to an ancestor level,
    which is left for the caller.

    Args:
        records: Ordered rows, each a column label -> cell text mapping
        resolver: Maps item kinds to the column labels used in *records*
        start_index: Index of the first row of the level
        base_layer: Layer of the level's field rows (odd)
        max_depth: Maximum number of nesting levels open at once

    Returns:
        (group, consumed): the level's definitions and the number of rows
        walked, including deleted rows and rows of nested levels.

    Raises:
        MissingItemNameError: a record item kind is not configured
        MalformedRecordError: a layer cell is not a non-negative integer, or
            nested rows follow a class that has no field to own them
        HierarchyTooDeepError: nesting exceeds *max_depth*
    """
    labels = resolver.require(RECORD_KINDS)
    layer_label = labels[FieldKind.LAYER]
    delete_label = labels[FieldKind.LOGICAL_DELETE]

    stack = [_Frame(start_index, base_layer, DefinitionGroup())]
    index = start_index
    size = len(records)

    while True:
        frame = stack[-1]

        if index < size:
            record = records[index]
            layer = parse_layer(record.get(layer_label), index)
            at_boundary = layer + 1 < frame.base_layer
        else:
            at_boundary = True

        if at_boundary:
            stack.pop()
            consumed = index - frame.start_index
            logger.debug(f"Closed layer {frame.base_layer} at row {index} "
                         f"({len(frame.group)} definitions, {consumed} rows)")
            if not stack:
                return frame.group, consumed
            frame.owner.attach_nested(frame.group)
            continue

        if to_flag(record.get(delete_label)):
            logger.debug(f"Skipping deleted row {index}: {dict(record)}")
            index += 1
            continue

        if layer == frame.base_layer - 1 and layer % 2 == 0:
            frame.current = frame.group.add(_read_class(record, labels))
            logger.debug(f"Row {index}: class '{frame.current.name}' at layer {layer}")

        elif layer > frame.base_layer:
            owner = frame.current.last_field if frame.current else None
            if owner is None:
                raise MalformedRecordError(
                    f"Layer {layer} rows have no field to belong to",
                    index=index, value=record.get(layer_label),
                )
            if len(stack) >= max_depth:
                raise HierarchyTooDeepError(max_depth, index)
            logger.debug(f"Row {index}: opening layer {frame.base_layer + 2} "
                         f"under field '{owner.variable_name}'")
            stack.append(_Frame(index, frame.base_layer + 2, DefinitionGroup(), owner=owner))
            # The new level starts on this same row
            continue

        else:
            if frame.current is None:
                logger.warning(f"Row {index}: field at layer {layer} has no class "
                               f"header above it and will not be generated")
                frame.current = ClassDefinition()
            frame.current.add_field(_read_field(record, labels))

        index += 1


def reconstruct(
    records: Sequence[Mapping[str, str]],
    resolver: ItemNameResolver,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> DefinitionGroup:
    """
    Reconstruct the whole definition tree of a document.

    Raises:
        EmptyHierarchyError: no class definition was found
    """
    group, consumed = build(records, resolver, ROOT_START_INDEX, ROOT_BASE_LAYER, max_depth)
    if group.is_empty():
        raise EmptyHierarchyError(
            f"No class definitions found in {len(records)} records"
        )
    logger.info(f"Reconstructed {len(group)} top-level classes from {consumed} of "
                f"{len(records)} records (depth {group.depth()})")
    return group
