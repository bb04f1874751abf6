"""Tests for the item name resolver."""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from excel_to_dto.exceptions import ConfigurationError, MissingItemNameError
from excel_to_dto.items import (
    DEFAULT_ITEM_NAMES,
    META_KINDS,
    RECORD_KINDS,
    FieldKind,
    ItemNameResolver,
)


def test_defaults_cover_every_kind():
    resolver = ItemNameResolver.from_config()
    for kind in FieldKind:
        assert resolver.resolve(kind) == DEFAULT_ITEM_NAMES[kind]


def test_record_and_meta_kinds_partition_the_enum():
    assert set(RECORD_KINDS) | set(META_KINDS) == set(FieldKind)
    assert not set(RECORD_KINDS) & set(META_KINDS)


def test_config_overrides_are_case_insensitive():
    resolver = ItemNameResolver.from_config({"LAYER": "Level", "data_type": "Type"})
    assert resolver.resolve(FieldKind.LAYER) == "Level"
    assert resolver.resolve(FieldKind.DATA_TYPE) == "Type"
    assert resolver.resolve(FieldKind.DESCRIPTION) == "Description"


def test_unknown_key_is_rejected():
    with pytest.raises(ConfigurationError, match="colour"):
        ItemNameResolver.from_config({"colour": "Color"})


def test_missing_kind_without_defaults():
    resolver = ItemNameResolver.from_config({"layer": "Layer"}, use_defaults=False)
    assert resolver.resolve(FieldKind.LAYER) == "Layer"
    with pytest.raises(MissingItemNameError) as exc_info:
        resolver.resolve(FieldKind.LOGICAL_DELETE)
    assert exc_info.value.kind is FieldKind.LOGICAL_DELETE
    assert "LOGICAL_DELETE" in str(exc_info.value)


@pytest.mark.parametrize("blank", ["", None])
def test_blank_label_counts_as_missing(blank):
    resolver = ItemNameResolver.from_config({"creator": blank})
    with pytest.raises(MissingItemNameError):
        resolver.resolve(FieldKind.CREATOR)


def test_require_returns_all_labels():
    labels = ItemNameResolver.from_config().require(RECORD_KINDS)
    assert list(labels) == list(RECORD_KINDS)
    assert labels[FieldKind.LOGICAL_DELETE] == "Delete"


def test_non_string_labels_are_stringified():
    resolver = ItemNameResolver.from_config({"version": 2})
    assert resolver.resolve(FieldKind.VERSION) == "2"
