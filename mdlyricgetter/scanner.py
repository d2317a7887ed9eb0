import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from .const import DEFAULT_EXTENSION


class TraversalError(Exception):
    """
    A filesystem entry that could not be read during the walk.

    Instances are yielded by the scanner rather than raised, so that a single
    unreadable entry never ends the walk.
    """

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.path = path

    @classmethod
    def from_os_error(cls, error: OSError) -> 'TraversalError':
        path = Path(error.filename) if error.filename is not None else None
        return cls(error.strerror or str(error), path)


@dataclass
class ScanResult:
    files: list[Path] = field(default_factory=list)
    errors: list[TraversalError] = field(default_factory=list)
    depth_skipped_paths: list[Path] = field(default_factory=list)

    @property
    def depth_skipped(self) -> int:
        return len(self.depth_skipped_paths)


def normalize_extensions(extensions: Iterable[str]) -> tuple[str, ...]:
    normalized = tuple(
        ext.strip().lstrip('.').lower()
        for ext in extensions
        if ext.strip().lstrip('.')
    )
    return normalized or (DEFAULT_EXTENSION,)


class Scanner:
    """
    Walks a directory tree and yields the audio files to inspect.

    The root sits at depth 0. A directory whose depth equals ``max_depth`` is not
    entered at all; it is recorded instead and can be queried through
    ``skipped_due_to_depth`` and ``depth_skipped_paths`` once the walk is exhausted.
    Every call to ``walk`` starts over with fresh counters, so totals read after a
    partially consumed walk undercount and are not reliable.
    """

    def __init__(
        self,
        root: Path,
        max_depth: int | None = None,
        follow_symlinks: bool = False,
        extensions: Iterable[str] = (),
    ):
        self.root = Path(root)
        self.max_depth = max_depth
        self.follow_symlinks = follow_symlinks
        self.extensions = normalize_extensions(extensions)
        self._depth_skipped_paths: list[Path] = []

    def walk(self) -> Iterator[Path | TraversalError]:
        self._depth_skipped_paths = []
        return self._walk(self._depth_skipped_paths)

    def scan(self) -> ScanResult:
        """
        Walk the whole tree and return the files, errors and depth skips together.
        """
        result = ScanResult()
        for item in self.walk():
            if isinstance(item, TraversalError):
                result.errors.append(item)
            else:
                result.files.append(item)

        result.depth_skipped_paths.extend(self._depth_skipped_paths)
        return result

    def skipped_due_to_depth(self) -> int:
        return len(self._depth_skipped_paths)

    def depth_skipped_paths(self) -> list[Path]:
        return list(self._depth_skipped_paths)

    def _walk(self, depth_skipped: list[Path]) -> Iterator[Path | TraversalError]:
        top = os.fspath(self.root)

        if self.max_depth == 0 and self.root.is_dir():
            # The root itself sits at the depth limit
            depth_skipped.append(self.root)
            return

        errors: list[OSError] = []
        # Device/inode chains of each entered directory, used to detect symlink loops
        lineage: dict[str, tuple[tuple[int, int], ...]] = {}
        if self.follow_symlinks:
            try:
                lineage[top] = (_identity(top),)
            except OSError as e:
                yield TraversalError.from_os_error(e)
                return

        for dirpath, dirnames, filenames in os.walk(top, onerror=errors.append, followlinks=self.follow_symlinks):
            yield from _drain(errors)

            current = Path(dirpath)
            depth = len(current.relative_to(self.root).parts)

            for filename in sorted(filenames):
                path = current / filename
                if path.is_symlink():
                    if not self.follow_symlinks:
                        continue
                    if not path.exists():
                        yield TraversalError('dangling symbolic link', path)
                        continue
                if self.is_target(path):
                    yield path

            entered = []
            for dirname in sorted(dirnames):
                path = current / dirname
                if path.is_symlink() and not self.follow_symlinks:
                    continue

                if self.follow_symlinks:
                    child = os.path.join(dirpath, dirname)
                    try:
                        identity = _identity(child)
                    except OSError as e:
                        yield TraversalError.from_os_error(e)
                        continue
                    if identity in lineage[dirpath]:
                        yield TraversalError('filesystem loop detected', path)
                        continue
                    lineage[child] = lineage[dirpath] + (identity,)

                if self.max_depth is not None and depth + 1 >= self.max_depth:
                    depth_skipped.append(path)
                    continue

                entered.append(dirname)

            # Pruning in place keeps os.walk out of the skipped subtrees
            dirnames[:] = entered

        yield from _drain(errors)

    def is_target(self, path: Path) -> bool:
        return path.is_file() and has_allowed_extension(path, self.extensions)


def has_allowed_extension(path: Path, extensions: Iterable[str]) -> bool:
    ext = path.suffix.lstrip('.').lower()
    if not ext:
        return False

    return ext in extensions


def _identity(path: str) -> tuple[int, int]:
    stat = os.stat(path)
    return stat.st_dev, stat.st_ino


def _drain(errors: list[OSError]) -> Iterator[TraversalError]:
    while errors:
        yield TraversalError.from_os_error(errors.pop(0))
