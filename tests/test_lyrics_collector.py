"""Tests for the run coordinator's per-file classification."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from pytest_mock import MockerFixture

from mdlyricgetter.config import Config
from mdlyricgetter.lyrics_collector import LyricsCollector, main
from mdlyricgetter.report import Report
from mdlyricgetter.scanner import TraversalError
from mdlyricgetter.tags import TagReadError
from mdlyricgetter.writer import OutputFormat, OutputWriter


@pytest.fixture
def library(tmp_path: Path, write_track) -> Path:
    """A flat library with one match, one foreign artist and one track without lyrics."""

    root = tmp_path / "library"
    write_track(root / "match.mp3", artist="Studio Heroes", title="Hit Single", lyrics=["Verse one"])
    write_track(root / "ignore.mp3", artist="Composer", title="Ambient", lyrics=["Nope"])
    write_track(root / "empty.mp3", artist="Audio Crew", title="Silent")
    return root


def _config(root: Path, **options) -> Config:
    options.setdefault("output", root / "lyrics.txt")
    return Config(root=root, **options)


def test_explicit_filter_emits_only_the_match(library: Path) -> None:
    report = main(_config(library, artist_filter="Heroes"))

    summary = report.summary()
    assert (summary.scanned, summary.matched, summary.skipped_artist, summary.missing_lyrics) == (3, 1, 2, 0)
    assert summary.tag_errors == 0
    assert summary.walk_errors == 0

    contents = (library / "lyrics.txt").read_text(encoding="utf-8")
    assert contents == "=== Hit Single ===\nArtist: Studio Heroes\nVerse one\n\n"


def test_empty_filter_matches_every_artist(library: Path) -> None:
    report = main(_config(library, artist_filter=""))

    assert report.matched == 2
    assert report.missing_lyrics == 1
    assert report.skipped_artist == 0

    contents = (library / "lyrics.txt").read_text(encoding="utf-8")
    assert "Hit Single" in contents
    assert "Ambient" in contents
    assert "Silent" not in contents


def test_default_filter_reports_missing_lyrics(library: Path, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="mdlyricgetter")

    report = main(_config(library))

    assert (report.matched, report.missing_lyrics, report.skipped_artist) == (1, 1, 1)
    assert "Captured lyrics for 'Hit Single' by Studio Heroes" in caplog.text
    assert f"Skipping 'Silent' by Audio Crew in file '{library / 'empty.mp3'}' -- no lyrics frames found." in caplog.text


def test_dry_run_never_creates_output(library: Path) -> None:
    output = library / "lyrics.txt"

    report = main(_config(library, artist_filter="", dry_run=True))

    assert report.matched == 2
    assert not output.exists()


def test_unreadable_tags_are_counted(library: Path) -> None:
    _ = (library / "broken.mp3").write_bytes(b"not a tag")

    report = main(_config(library, artist_filter="Heroes"))

    assert report.scanned == 4
    assert report.tag_errors == 1
    assert report.matched + report.skipped_artist + report.missing_lyrics + report.tag_errors == report.scanned


def test_tag_reader_failures_never_abort(library: Path, mocker: MockerFixture) -> None:
    read_tags = mocker.patch(
        "mdlyricgetter.lyrics_collector.read_tags",
        side_effect=TagReadError("x.mp3", "corrupt frame"),
    )

    report = main(_config(library))

    assert read_tags.call_count == 3
    assert report.tag_errors == 3
    assert report.matched == 0


def test_corrupt_file_between_good_tracks_is_counted(tmp_path: Path, write_track, write_corrupt_track) -> None:
    """A parser crash on one file is a tag error and the remaining files are still processed."""

    root = tmp_path / "library"
    write_track(root / "a_good.mp3", artist="Audio Crew", title="First", lyrics=["One"])
    write_corrupt_track(root / "b_corrupt.mp3")
    write_track(root / "c_good.mp3", artist="Audio Crew", title="Last", lyrics=["Two"])

    report = main(_config(root))

    assert (report.scanned, report.matched, report.tag_errors) == (3, 2, 1)
    contents = (root / "lyrics.txt").read_text(encoding="utf-8")
    assert "=== First ===" in contents
    assert "=== Last ===" in contents


def test_depth_skips_are_folded_into_report(tmp_path: Path, write_track, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="mdlyricgetter")
    root = tmp_path / "library"
    deep = root / "sub" / "deep"
    write_track(root / "surface.mp3", artist="Audio Layer", title="Surface", lyrics=["Top level"])
    write_track(root / "sub" / "middle.mp3", artist="Audio Layer", title="Middle", lyrics=["Between"])
    write_track(deep / "buried.mp3", artist="Audio Layer", title="Buried", lyrics=["Hidden"])
    summary_path = tmp_path / "summary.json"

    report = main(_config(root, max_depth=2, summary_json=summary_path))

    assert report.scanned == 2
    assert report.depth_skipped_dirs == 1
    assert report.depth_skip_paths == [deep]
    assert "Max depth 2 prevented descending into 1 directories." in caplog.text
    assert f"Skipped due to depth limit: {deep}" in caplog.text

    summary = json.loads(summary_path.read_text(encoding="utf-8"))
    assert summary["depth_skipped_dirs"] == 1
    assert summary["depth_skip_paths"] == [str(deep)]


def test_json_output_roundtrip(tmp_path: Path, write_track) -> None:
    root = tmp_path / "library"
    write_track(root / "one.mp3", artist="Audio Ensemble", title="Sunrise", lyrics=["Golden light"])
    write_track(root / "two.mp3", artist="Audio Ensemble", title="Midday", lyrics=["Bright sky"])

    _ = main(_config(root, output_format=OutputFormat.JSON))

    lines = (root / "lyrics.txt").read_text(encoding="utf-8").splitlines()
    assert [json.loads(line) for line in lines] == [
        {"artist": "Audio Ensemble", "title": "Sunrise", "lyrics": "Golden light"},
        {"artist": "Audio Ensemble", "title": "Midday", "lyrics": "Bright sky"},
    ]


def test_traversal_errors_are_counted(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="mdlyricgetter")
    collector = LyricsCollector(OutputWriter(None, OutputFormat.TEXT), "udio")

    collector.record_traversal_error(TraversalError("Permission denied", Path("locked")))
    collector.record_traversal_error(TraversalError("filesystem loop detected"))

    assert collector.report.walk_errors == 2
    assert collector.report.scanned == 0
    assert "Traversal error on 'locked': Permission denied" in caplog.text
    assert "Traversal error: filesystem loop detected" in caplog.text


def test_missing_root_is_counted_as_walk_error(tmp_path: Path) -> None:
    report = main(_config(tmp_path / "gone", output=tmp_path / "lyrics.txt"))

    assert report == Report(walk_errors=1)
