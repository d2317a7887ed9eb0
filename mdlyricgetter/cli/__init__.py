from pathlib import Path

import click

from mdlyricgetter.config import Config, ConfigError
from mdlyricgetter.const import DEFAULT_ARTIST_FILTER, DEFAULT_EXTENSION, PROGNAME, VERSION
from mdlyricgetter.logging import init_logging
from mdlyricgetter.lyrics_collector import main
from mdlyricgetter.writer import OutputError, OutputFormat
from .format_choice import FormatChoice


@click.command(
    context_settings=dict(
        max_content_width=160,
    ),
)
@click.option(
    '--root',
    type=click.Path(file_okay=False, path_type=Path),
    help='the directory to scan (default: the current directory)',
)
@click.option(
    '-o',
    '--output',
    type=click.Path(dir_okay=False, path_type=Path),
    help='append lyrics to the file at PATH, relative paths are resolved against the root (default: lyrics.txt)',
)
@click.option(
    '-n',
    '--dry-run',
    is_flag=True,
    help='scan and match without writing to the output file',
)
@click.option(
    '-a',
    '--artist-filter',
    default=DEFAULT_ARTIST_FILTER,
    show_default=True,
    help='case-insensitive substring to look for within the artist name',
)
@click.option(
    '-e',
    '--extensions',
    default=DEFAULT_EXTENSION,
    show_default=True,
    help='comma-separated list of file extensions to scan (case-insensitive)',
)
@click.option(
    '-f',
    '--format',
    'output_format',
    type=FormatChoice(),
    default=OutputFormat.TEXT.value,
    show_default=True,
    help='output format for matched tracks',
)
@click.option(
    '-d',
    '--max-depth',
    type=click.IntRange(min=0),
    help='limit recursion depth when scanning (the root is depth 0)',
)
@click.option(
    '-L',
    '--follow-symlinks',
    is_flag=True,
    help='follow directory symlinks while scanning',
)
@click.option(
    '-s',
    '--summary-json',
    type=click.Path(dir_okay=False, path_type=Path),
    help='write a JSON summary report to the file at PATH',
)
@click.option(
    '-q',
    '--quiet',
    is_flag=True,
    help='only log errors',
)
@click.version_option(
    VERSION,
    '-v',
    '--version',
    prog_name=PROGNAME,
    message='%(prog)s %(version)s',
    help='show the version and exit',
)
@click.help_option(
    '-h',
    '--help',
    help='show this message and exit',
)
def cli(
    root: Path | None,
    output: Path | None,
    dry_run: bool,
    artist_filter: str,
    extensions: str,
    output_format: OutputFormat,
    max_depth: int | None,
    follow_symlinks: bool,
    summary_json: Path | None,
    quiet: bool,
):
    """
    Scan audio files and extract lyrics when the artist matches a filter.
    """
    try:
        config = Config.from_options(
            root=root,
            output=output,
            dry_run=dry_run,
            artist_filter=artist_filter,
            extensions=extensions,
            output_format=output_format,
            max_depth=max_depth,
            follow_symlinks=follow_symlinks,
            summary_json=summary_json,
            quiet=quiet,
        )
        init_logging(config.quiet)
        main(config)
    except (ConfigError, OutputError) as e:
        raise click.ClickException(str(e)) from e
