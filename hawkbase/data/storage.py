"""Depth-indexed position collections stored as record files.

A store is a directory holding one text file per collection:

  khk.0, khk.1, ...    positions at that distance to mate (immutable once written)
  khk.pos              positions not yet classified (rewritten by every pass)
  khk.draw             the residual undecided set once the solver is finished
  khk.progress.yaml    which depth was last published

Collections are only ever replaced whole, through a temp file and os.replace,
so a crash mid-pass leaves the previous contents in place. Whole passes are
committed through the manifest (see commit_pass).
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, Optional

import yaml

from hawkbase.game.notation import position_to_record, record_to_position
from hawkbase.game.state import Position

logger = logging.getLogger("hawkbase.storage")

UNDECIDED = "pos"
DRAW = "draw"


def depth_collection(depth: int) -> str:
    """Collection name for the positions at exactly `depth` plies from mate."""
    if depth < 0:
        raise ValueError(f"Depth must be non-negative, got {depth}")
    return str(depth)


class StoreError(Exception):
    """Base class for position store failures."""


class CorruptRecordError(StoreError):
    """Raised when a collection contains a line that is not a valid record."""

    def __init__(self, path: Path, line_number: int, line: str, reason: str):
        self.path = path
        self.line_number = line_number
        self.line = line
        super().__init__(f"{path}:{line_number}: corrupt record {line!r} ({reason})")


class MissingCollectionError(StoreError):
    """Raised when a pass needs a collection that was never published."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Required collection {path} does not exist")


class CorruptManifestError(StoreError):
    """Raised when the progress manifest cannot be read back."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"{path}: unreadable progress manifest ({reason})")


@dataclass
class Progress:
    """Contents of the progress manifest."""
    completed_depth: int = -1
    counts: dict[int, int] = field(default_factory=dict)
    undecided: int = 0
    draws: Optional[int] = None
    complete: bool = False
    pending_depth: Optional[int] = None  # set while a commit is being swapped in


class _CollectionWriter:
    def __init__(self, f):
        self._f = f
        self.count = 0

    def write(self, pos: Position):
        self._f.write(position_to_record(pos) + "\n")
        self.count += 1


class PositionStore:
    """Named position collections under one directory."""

    def __init__(self, root: str | os.PathLike, prefix: str = "khk"):
        self.root = Path(root)
        self.prefix = prefix

    def path(self, collection: str) -> Path:
        return self.root / f"{self.prefix}.{collection}"

    @property
    def progress_path(self) -> Path:
        return self.root / f"{self.prefix}.progress.yaml"

    def exists(self, collection: str) -> bool:
        return self.path(collection).is_file()

    def require(self, collection: str) -> Path:
        path = self.path(collection)
        if not path.is_file():
            raise MissingCollectionError(path)
        return path

    def append(self, collection: str, pos: Position):
        """Append a single record to a collection, creating it if needed."""
        os.makedirs(self.root, exist_ok=True)
        with open(self.path(collection), "a") as f:
            f.write(position_to_record(pos) + "\n")

    @contextmanager
    def writer(self, collection: str) -> Iterator[_CollectionWriter]:
        """Batch appends to a collection through one open file."""
        os.makedirs(self.root, exist_ok=True)
        with open(self.path(collection), "a") as f:
            yield _CollectionWriter(f)

    def read_all(self, collection: str) -> Iterator[Position]:
        """Lazily read every record of a collection in insertion order.

        Raises:
            MissingCollectionError: If the collection does not exist.
            CorruptRecordError: On the first malformed line.
        """
        path = self.require(collection)
        return self._iter_records(path)

    @staticmethod
    def _iter_records(path: Path) -> Iterator[Position]:
        with open(path) as f:
            for line_number, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                try:
                    yield record_to_position(line)
                except ValueError as e:
                    raise CorruptRecordError(path, line_number, line.rstrip("\n"), str(e)) from e

    def count(self, collection: str) -> int:
        return sum(1 for _ in self.read_all(collection))

    def staged_path(self, collection: str) -> Path:
        path = self.path(collection)
        return path.with_name(path.name + ".tmp")

    def _stage(self, collection: str, positions: Iterable[Position]) -> int:
        os.makedirs(self.root, exist_ok=True)
        tmp_path = self.staged_path(collection)
        try:
            with open(tmp_path, "w") as f:
                w = _CollectionWriter(f)
                for pos in positions:
                    w.write(pos)
                f.flush()
                os.fsync(f.fileno())
        except BaseException:
            if tmp_path.exists():
                tmp_path.unlink()
            raise
        return w.count

    def _publish(self, collection: str):
        os.replace(self.staged_path(collection), self.path(collection))

    def replace(self, collection: str, positions: Iterable[Position]) -> int:
        """Atomically replace a collection's contents. Returns the record count."""
        n = self._stage(collection, positions)
        self._publish(collection)
        return n

    def clear(self, collection: str):
        path = self.path(collection)
        if path.exists():
            path.unlink()

    def depths(self) -> list[int]:
        """Depths that have a collection on disk, ascending."""
        if not self.root.is_dir():
            return []
        result = []
        for path in self.root.glob(f"{self.prefix}.*"):
            suffix = path.name[len(self.prefix) + 1:]
            if suffix.isdigit():
                result.append(int(suffix))
        return sorted(result)

    def load_progress(self) -> Progress:
        if not self.progress_path.is_file():
            return Progress()
        try:
            with open(self.progress_path) as f:
                data = yaml.safe_load(f) or {}
            progress = Progress(**data)
            progress.counts = {int(k): int(v) for k, v in progress.counts.items()}
        except (yaml.YAMLError, TypeError, AttributeError, ValueError) as e:
            raise CorruptManifestError(self.progress_path, str(e)) from e
        return progress

    def save_progress(self, progress: Progress):
        os.makedirs(self.root, exist_ok=True)
        tmp_path = self.progress_path.with_name(self.progress_path.name + ".tmp")
        with open(tmp_path, "w") as f:
            yaml.safe_dump(asdict(progress), f, sort_keys=False)
        os.replace(tmp_path, self.progress_path)

    def commit_pass(self, depth: int, solved: list[Position], remaining: list[Position]):
        """Publish a finished pass: the new depth-set and the shrunk undecided set.

        Both collections are staged first, then the manifest marks the depth
        as pending, then both are swapped in. recover() finishes a commit
        that was interrupted after the pending mark; an interruption before
        it leaves the previous depth authoritative and the pass is rerun.
        """
        self._stage(depth_collection(depth), solved)
        self._stage(UNDECIDED, remaining)

        progress = self.load_progress()
        progress.pending_depth = depth
        self.save_progress(progress)

        self._publish(depth_collection(depth))
        self._publish(UNDECIDED)

        progress.completed_depth = depth
        progress.counts[depth] = len(solved)
        progress.undecided = len(remaining)
        progress.pending_depth = None
        self.save_progress(progress)
        logger.debug(f"Committed depth {depth}: {len(solved)} solved, "
                     f"{len(remaining)} undecided")

    def recover(self) -> bool:
        """Roll an interrupted commit forward. Returns True if there was one."""
        progress = self.load_progress()
        depth = progress.pending_depth
        if depth is None:
            return False

        for collection in (depth_collection(depth), UNDECIDED):
            if self.staged_path(collection).exists():
                self._publish(collection)

        progress.completed_depth = depth
        progress.counts[depth] = self.count(depth_collection(depth))
        progress.undecided = self.count(UNDECIDED)
        progress.pending_depth = None
        self.save_progress(progress)
        logger.warning(f"Recovered interrupted commit of depth {depth}")
        return True
