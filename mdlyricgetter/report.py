import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from .writer import OutputError

logger = logging.getLogger(__name__)


@dataclass
class Report:
    """
    Counters for a single run.

    Every scanned file ends up in exactly one of matched, skipped_artist,
    missing_lyrics or tag_errors.
    """

    scanned: int = 0
    matched: int = 0
    skipped_artist: int = 0
    missing_lyrics: int = 0
    depth_skipped_dirs: int = 0
    depth_skip_paths: list[Path] = field(default_factory=list)
    walk_errors: int = 0
    tag_errors: int = 0

    def record_scan(self):
        self.scanned += 1

    def record_match(self):
        self.matched += 1

    def record_artist_skip(self):
        self.skipped_artist += 1

    def record_missing_lyrics(self):
        self.missing_lyrics += 1

    def record_walk_error(self):
        self.walk_errors += 1

    def record_tag_error(self):
        self.tag_errors += 1

    def record_depth_skips(self, count: int, paths: list[Path]):
        self.depth_skipped_dirs += count
        self.depth_skip_paths.extend(paths)

    def summary(self) -> 'Summary':
        return Summary(
            scanned=self.scanned,
            matched=self.matched,
            skipped_artist=self.skipped_artist,
            missing_lyrics=self.missing_lyrics,
            walk_errors=self.walk_errors,
            tag_errors=self.tag_errors,
            depth_skipped_dirs=self.depth_skipped_dirs,
            depth_skip_paths=tuple(self.depth_skip_paths),
        )

    def emit_summary(self):
        logger.info(
            f'Scanned {self.scanned} files -- matched {self.matched}, artist skips {self.skipped_artist},'
            f' missing lyrics {self.missing_lyrics}, directories at depth limit {self.depth_skipped_dirs}'
        )

        for path in self.depth_skip_paths:
            logger.info(f'Depth limit prevented descent into directory \'{path}\'')

        if self.walk_errors or self.tag_errors:
            logger.warning(
                f'Encountered {self.walk_errors} traversal errors and {self.tag_errors} tag read failures.'
            )


@dataclass(frozen=True)
class Summary:
    scanned: int
    matched: int
    skipped_artist: int
    missing_lyrics: int
    walk_errors: int
    tag_errors: int
    depth_skipped_dirs: int
    depth_skip_paths: tuple[Path, ...]

    def to_dict(self) -> dict:
        return {
            'scanned': self.scanned,
            'matched': self.matched,
            'skipped_artist': self.skipped_artist,
            'missing_lyrics': self.missing_lyrics,
            'walk_errors': self.walk_errors,
            'tag_errors': self.tag_errors,
            'depth_skipped_dirs': self.depth_skipped_dirs,
            'depth_skip_paths': [str(path) for path in self.depth_skip_paths],
        }


def write_summary(path: Path, report: Report):
    try:
        # Nothing is written unless the whole summary encodes
        data = json.dumps(report.summary().to_dict(), indent=2, ensure_ascii=False).encode('utf-8')
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except (OSError, ValueError) as e:
        raise OutputError(f'failed to write JSON summary to \'{path}\': {e}') from e
