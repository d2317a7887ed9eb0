"""Shared fixtures for writing tagged test tracks."""

from __future__ import annotations

import struct
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest
from mutagen.id3 import ID3, TIT2, TPE1, TPE2, USLT

WriteTrack = Callable[..., Path]


def _write_track(
    path: Path,
    artist: str | None = None,
    album_artist: str | None = None,
    title: str | None = None,
    lyrics: Sequence[str] = (),
) -> Path:
    tags = ID3()
    if artist is not None:
        tags.add(TPE1(encoding=3, text=[artist]))
    if album_artist is not None:
        tags.add(TPE2(encoding=3, text=[album_artist]))
    if title is not None:
        tags.add(TIT2(encoding=3, text=[title]))
    for index, text in enumerate(lyrics):
        tags.add(USLT(encoding=3, lang="eng", desc=f"segment{index}", text=text))

    path.parent.mkdir(parents=True, exist_ok=True)
    # Placeholder audio bytes so the tag can be written in front of them
    _ = path.write_bytes(bytes(16))
    tags.save(path)
    return path


@pytest.fixture
def write_track() -> WriteTrack:
    """Write an ID3v2.4 tagged placeholder track and return its path."""

    return _write_track


def _write_corrupt_track(path: Path) -> Path:
    # A WavPack block header whose sample rate index points past the rate table
    header = struct.pack("<4sIHBBIIIII", b"wvpk", 24, 0x410, 0, 0, 100, 0, 100, 0xF << 23, 0)
    path.parent.mkdir(parents=True, exist_ok=True)
    _ = path.write_bytes(header)
    return path


@pytest.fixture
def write_corrupt_track() -> Callable[[Path], Path]:
    """Write a file that makes mutagen's format parser fail with a non-mutagen exception."""

    return _write_corrupt_track
