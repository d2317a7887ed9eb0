import logging
from pathlib import Path

from .config import Config
from .metadata import extract_metadata, match_artist, resolve_title
from .report import Report, write_summary
from .scanner import Scanner, TraversalError
from .tags import TagReadError, read_tags
from .writer import OutputWriter

logger = logging.getLogger(__name__)


def main(config: Config) -> Report:
    """
    Run a single pass over the collection.

    Per-file problems are counted and logged; only failures of the output or
    summary files propagate.
    """
    report = Report()
    scanner = Scanner(config.root, config.max_depth, config.follow_symlinks, config.extensions)

    with OutputWriter.create(config.output, config.output_format, config.dry_run) as writer:
        collector = LyricsCollector(writer, config.artist_filter, report)

        for entry in scanner.walk():
            if isinstance(entry, TraversalError):
                collector.record_traversal_error(entry)
            else:
                collector.process_file(entry)

        depth_skipped = scanner.skipped_due_to_depth()
        if depth_skipped:
            skipped_paths = scanner.depth_skipped_paths()
            report.record_depth_skips(depth_skipped, skipped_paths)
            if config.max_depth is not None:
                logger.warning(f'Max depth {config.max_depth} prevented descending into {depth_skipped} directories.')
                for path in skipped_paths:
                    logger.info(f'Skipped due to depth limit: {path}')

        writer.flush()

    report.emit_summary()

    if config.summary_json:
        write_summary(config.summary_json, report)

    return report


class LyricsCollector:
    def __init__(self, writer: OutputWriter, artist_filter: str, report: Report | None = None):
        self.writer = writer
        self.artist_filter = artist_filter
        self.report = report if report is not None else Report()

    def process_file(self, path: Path) -> None:
        self.report.record_scan()

        try:
            tag = read_tags(path)
        except TagReadError as e:
            self.report.record_tag_error()
            logger.warning(f'Failed to read tags from \'{path}\': {e}')
            return

        track = extract_metadata(tag, self.artist_filter)
        if track is not None:
            self.writer.write_entry(track)
            self.report.record_match()
            logger.info(f'Captured lyrics for \'{track.title}\' by {track.artist}')
            return

        artist = match_artist(tag, self.artist_filter)
        if artist is None:
            self.report.record_artist_skip()
            logger.debug(f'Skipping \'{path}\' -- artist does not match')
            return

        self.report.record_missing_lyrics()
        logger.info(f'Skipping \'{resolve_title(tag)}\' by {artist} in file \'{path}\' -- no lyrics frames found.')

    def record_traversal_error(self, error: TraversalError) -> None:
        self.report.record_walk_error()
        if error.path is not None:
            logger.warning(f'Traversal error on \'{error.path}\': {error}')
        else:
            logger.warning(f'Traversal error: {error}')
