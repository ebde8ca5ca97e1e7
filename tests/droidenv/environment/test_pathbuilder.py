# tests/droidenv/environment/test_pathbuilder.py
from __future__ import annotations
from pathlib import Path

import pytest

from droidenv.core.errors import InvalidArgumentError
from droidenv.environment.pathbuilder import buildPath, buildPaths, validateSegment


# ----------------------------
# buildPath
# ----------------------------

def test_buildPath_joinsSegmentsInOrder() -> None:
    out = buildPath("/storage/emulated/0", "Android", "data", "com.example", "cache")
    assert out == Path("/storage/emulated/0/Android/data/com.example/cache")
    assert str(out) == "/storage/emulated/0/Android/data/com.example/cache"


def test_buildPath_noSegments_returnsBase() -> None:
    assert buildPath("/storage/sdcard0") == Path("/storage/sdcard0")
    assert buildPath(Path("/data")) == Path("/data")


def test_buildPath_relativeBase_isMadeAbsolute(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    out = buildPath("volume", "Android")
    assert out.is_absolute()
    assert out == tmp_path / "volume" / "Android"


def test_buildPath_keepsRepeatedSegments() -> None:
    # No dedupe / collapse of segments
    out = buildPath("/a", "data", "data", "data")
    assert out.parts[-3:] == ("data", "data", "data")


@pytest.mark.parametrize("segment", [None, "", ".", "..", "/etc", "a/b", "nul\x00byte", 5])
def test_buildPath_rejectsUnsafeSegments(segment) -> None:
    with pytest.raises(InvalidArgumentError):
        buildPath("/storage/emulated/0", "Android", segment)


def test_buildPath_rejectsMissingBase() -> None:
    with pytest.raises(InvalidArgumentError):
        buildPath(None, "Android")  # type: ignore[arg-type]
    with pytest.raises(InvalidArgumentError):
        buildPath("", "Android")


def test_invalidArgumentError_isValueError() -> None:
    with pytest.raises(ValueError):
        validateSegment("")


def test_validateSegment_returnsSegmentUnchanged() -> None:
    assert validateSegment("com.example.app") == "com.example.app"
    assert validateSegment("...hidden") == "...hidden"


# ----------------------------
# buildPaths
# ----------------------------

def test_buildPaths_preservesOrderAndCount() -> None:
    out = buildPaths(["/b", "/a", "/b"], "Android", "obb")
    assert out == [Path("/b/Android/obb"), Path("/a/Android/obb"), Path("/b/Android/obb")]


def test_buildPaths_emptyBases_returnsEmptyList() -> None:
    assert buildPaths([], "Android") == []


def test_buildPaths_rejectsBadSegmentEvenWithoutBases() -> None:
    with pytest.raises(InvalidArgumentError):
        buildPaths([], "Android", "")
