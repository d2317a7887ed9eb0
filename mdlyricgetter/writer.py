import json
import os
from enum import Enum
from pathlib import Path
from typing import TextIO

from .metadata import TrackMetadata


class OutputFormat(Enum):
    TEXT = 'text'
    JSON = 'json'


class OutputError(Exception):
    """
    The output or summary file could not be opened or written.
    """


def opener(path: str, flags: int) -> int:
    return os.open(path, flags, 0o644)


class OutputWriter:
    """
    Append-only sink for matched tracks.

    In dry-run mode nothing is opened, so the output path is never created or touched.
    """

    def __init__(self, file: TextIO | None, output_format: OutputFormat):
        self.file = file
        self.output_format = output_format

    @classmethod
    def create(cls, path: Path, output_format: OutputFormat, dry_run: bool) -> 'OutputWriter':
        if dry_run:
            return cls(None, output_format)

        try:
            file = open(path, 'a', encoding='utf-8', opener=opener)
        except OSError as e:
            raise OutputError(f'failed to open output file \'{path}\': {e}') from e

        return cls(file, output_format)

    def __enter__(self) -> 'OutputWriter':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def write_entry(self, track: TrackMetadata):
        if self.file is None:
            return

        if self.output_format is OutputFormat.JSON:
            entry = json.dumps(track.to_dict(), ensure_ascii=False) + '\n'
        else:
            entry = format_block(track)

        try:
            self.file.write(entry)
        except OSError as e:
            raise OutputError(f'failed to append lyrics to output file: {e}') from e

    def flush(self):
        if self.file is None:
            return

        try:
            self.file.flush()
        except OSError as e:
            raise OutputError(f'failed to flush buffered lyrics to output file: {e}') from e

    def close(self):
        if self.file is not None:
            self.file.close()
            self.file = None


def format_block(track: TrackMetadata) -> str:
    lyrics = track.lyrics.rstrip('\r\n')
    return f'=== {track.title} ===\nArtist: {track.artist}\n{lyrics}\n\n'
