from dataclasses import dataclass
from pathlib import Path

from .const import DEFAULT_ARTIST_FILTER, DEFAULT_EXTENSION, DEFAULT_OUTPUT_NAME
from .scanner import normalize_extensions
from .writer import OutputFormat


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class Config:
    root: Path
    output: Path
    dry_run: bool = False
    artist_filter: str = DEFAULT_ARTIST_FILTER
    extensions: tuple[str, ...] = (DEFAULT_EXTENSION,)
    output_format: OutputFormat = OutputFormat.TEXT
    max_depth: int | None = None
    follow_symlinks: bool = False
    summary_json: Path | None = None
    quiet: bool = False

    @classmethod
    def from_options(
        cls,
        root: Path | None = None,
        output: Path | None = None,
        dry_run: bool = False,
        artist_filter: str = DEFAULT_ARTIST_FILTER,
        extensions: str = DEFAULT_EXTENSION,
        output_format: OutputFormat = OutputFormat.TEXT,
        max_depth: int | None = None,
        follow_symlinks: bool = False,
        summary_json: Path | None = None,
        quiet: bool = False,
    ) -> 'Config':
        """
        Normalize the command line options.

        The root is resolved against the working directory and must exist.
        The output and summary paths are resolved against the root.
        :raise ConfigError: if the root is not an existing directory.
        """
        root = normalize_root(root)
        output = make_absolute(root, Path(output) if output else Path(DEFAULT_OUTPUT_NAME))
        summary_json = make_absolute(root, Path(summary_json)) if summary_json else None

        return cls(
            root=root,
            output=output,
            dry_run=dry_run,
            artist_filter=artist_filter,
            extensions=parse_extensions(extensions),
            output_format=output_format,
            max_depth=max_depth,
            follow_symlinks=follow_symlinks,
            summary_json=summary_json,
            quiet=quiet,
        )


def normalize_root(root: Path | None) -> Path:
    root = Path(root).expanduser().absolute() if root else Path.cwd()
    if not root.is_dir():
        raise ConfigError(f'The provided root path \'{root}\' is not an existing directory.')

    return root


def make_absolute(root: Path, path: Path) -> Path:
    return path if path.is_absolute() else root / path


def parse_extensions(raw: str) -> tuple[str, ...]:
    return normalize_extensions(raw.split(','))
