# tests/droidenv/core/test_dictpath_property.py
from __future__ import annotations
from typing import Any

import pytest

hypothesis = pytest.importorskip("hypothesis")
from hypothesis import given, strategies as st  # type: ignore[no-redef]

from droidenv.core.dictpath import getByPath, hasPath, setByPath, deleteByPath


# Settings-key segments: no separator
segment_strat = st.text(
    alphabet=st.characters(blacklist_characters=["."], min_codepoint=32, max_codepoint=126),
    min_size=1,
    max_size=8,
)


@given(st.lists(segment_strat, min_size=1, max_size=4), st.integers())
def test_setThenGet_returnsValue(segments: list[str], value: int) -> None:
    data: dict[str, Any] = {}
    path = ".".join(segments)

    setByPath(data, path, value, createIfMissing=True)
    assert getByPath(data, path) == value
    assert hasPath(data, path)


@given(st.lists(segment_strat, min_size=1, max_size=4))
def test_deleteThenGet_leavesEmptyRoot(segments: list[str]) -> None:
    data: dict[str, Any] = {}
    path = ".".join(segments)

    setByPath(data, path, 1, createIfMissing=True)
    assert deleteByPath(data, path) is True
    assert getByPath(data, path) is None
    assert data == {}
