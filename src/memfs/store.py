"""In-memory tree of directories and files."""
from __future__ import annotations

import itertools
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple, Union

from .errors import EntryExists, EntryNotFound, IsADirectory, NotADirectory
from .events import ChangeEvent, ChangeType
from .notifier import ChangeNotifier
from .paths import PathLike, Segments, format_path, is_ancestor, parent_of, to_segments

logger = logging.getLogger(__name__)

Clock = Callable[[], float]

# Identifiers are unique across every store in the process.
_ENTRY_IDS = itertools.count(1)


class EntryKind(str, Enum):
    """The closed set of entry kinds."""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass
class File:
    entry_id: int
    name: str
    ctime: float
    mtime: float
    data: bytes = b""
    kind: EntryKind = field(default=EntryKind.FILE, init=False)

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class Directory:
    entry_id: int
    name: str
    ctime: float
    mtime: float
    children: Dict[str, int] = field(default_factory=dict)
    kind: EntryKind = field(default=EntryKind.DIRECTORY, init=False)

    @property
    def size(self) -> int:
        return 0


Entry = Union[File, Directory]


@dataclass(frozen=True)
class EntryMetadata:
    """Snapshot of an entry returned by :meth:`EntryStore.stat`."""

    kind: EntryKind
    name: str
    ctime: float
    mtime: float
    size: int
    entry_id: int


def _metadata(entry: Entry) -> EntryMetadata:
    return EntryMetadata(
        kind=entry.kind,
        name=entry.name,
        ctime=entry.ctime,
        mtime=entry.mtime,
        size=entry.size,
        entry_id=entry.entry_id,
    )


class EntryStore:
    """Owns the entry arena and enforces the tree invariants.

    Every precondition is checked before the tree is touched, so a failed call
    leaves both the tree and the pending change batch unchanged. Mutations
    hand their change records to the attached :class:`ChangeNotifier`.
    """

    def __init__(self, notifier: Optional[ChangeNotifier] = None, *, clock: Clock = time.time):
        self._notifier = notifier if notifier is not None else ChangeNotifier()
        self._clock = clock
        self._entries: Dict[int, Entry] = {}
        self._root = self._new_directory("")

    @property
    def notifier(self) -> ChangeNotifier:
        return self._notifier

    @property
    def root_id(self) -> int:
        return self._root.entry_id

    def __len__(self) -> int:
        return len(self._entries)

    # -- queries --

    def stat(self, path: PathLike) -> EntryMetadata:
        return _metadata(self._lookup(to_segments(path)))

    def exists(self, path: PathLike) -> bool:
        try:
            self._lookup(to_segments(path))
        except EntryNotFound:
            return False
        return True

    def read_directory(self, path: PathLike) -> List[Tuple[str, EntryKind]]:
        directory = self._lookup_directory(to_segments(path))
        return [(name, self._entries[child_id].kind) for name, child_id in directory.children.items()]

    def read_file(self, path: PathLike) -> bytes:
        segments = to_segments(path)
        entry = self._lookup(segments)
        if entry.kind is EntryKind.DIRECTORY:
            raise IsADirectory(format_path(segments))
        return entry.data

    def walk(self, path: PathLike = "/") -> List[Tuple[str, EntryMetadata]]:
        """Return ``(path, metadata)`` for ``path`` and its descendants, depth-first.

        The listing is built in one pass before returning, so a caller on a
        listener thread never holds a lazy cursor into the arena. The store is
        still unlocked: concurrent writers must be serialized by the caller.
        """

        segments = to_segments(path)
        results: List[Tuple[str, EntryMetadata]] = []
        stack = [(segments, self._lookup(segments))]
        while stack:
            current, entry = stack.pop()
            results.append((format_path(current), _metadata(entry)))
            if entry.kind is EntryKind.DIRECTORY:
                children = sorted(entry.children.items(), reverse=True)
                stack.extend((current + (name,), self._entries[child_id]) for name, child_id in children)
        return results

    # -- mutations --

    def write_file(self, path: PathLike, content: bytes, *, create: bool = False, overwrite: bool = False) -> None:
        segments = to_segments(path)
        # memoryview rejects ints and str instead of zero-filling or encoding.
        data = bytes(memoryview(content))
        display = format_path(segments)
        if not segments:
            raise IsADirectory(display)
        parent = self._lookup_parent(segments)
        name = segments[-1]
        child_id = parent.children.get(name)
        existing = self._entries[child_id] if child_id is not None else None

        if existing is not None and existing.kind is EntryKind.DIRECTORY:
            raise IsADirectory(display)
        if existing is None and not create:
            raise EntryNotFound(display)
        if existing is not None and not overwrite:
            raise EntryExists(display)

        now = self._clock()
        if existing is None:
            entry = self._new_file(name, now)
            entry.data = data
            parent.children[name] = entry.entry_id
            change = ChangeEvent(ChangeType.CREATED, display, entry_id=entry.entry_id)
        else:
            entry = existing
            entry.data = data
            entry.mtime = now
            change = ChangeEvent(ChangeType.CHANGED, display, entry_id=entry.entry_id)
        parent.mtime = now
        logger.debug("Wrote %s bytes to %s", len(data), display)
        self._notifier.fire_soon(change)

    def create_directory(self, path: PathLike) -> None:
        segments = to_segments(path)
        display = format_path(segments)
        if not segments:
            raise EntryExists(display)
        parent = self._lookup_parent(segments)
        name = segments[-1]
        if name in parent.children:
            raise EntryExists(display)

        now = self._clock()
        directory = self._new_directory(name, now)
        parent.children[name] = directory.entry_id
        parent.mtime = now
        logger.debug("Created directory %s", display)
        self._notifier.fire_soon(
            ChangeEvent(ChangeType.CHANGED, format_path(parent_of(segments)), entry_id=parent.entry_id),
            ChangeEvent(ChangeType.CREATED, display, entry_id=directory.entry_id),
        )

    def delete(self, path: PathLike) -> None:
        segments = to_segments(path)
        display = format_path(segments)
        if not segments:
            raise ValueError("The root directory cannot be deleted")
        child_id = self._lookup(segments).entry_id
        parent = self._lookup_parent(segments)
        name = segments[-1]

        del parent.children[name]
        removed = self._discard_subtree(child_id)
        parent.mtime = self._clock()
        logger.debug("Deleted %s (%s entries)", display, removed)
        self._notifier.fire_soon(
            ChangeEvent(ChangeType.CHANGED, format_path(parent_of(segments)), entry_id=parent.entry_id),
            ChangeEvent(ChangeType.DELETED, display, entry_id=child_id),
        )

    def rename(self, old_path: PathLike, new_path: PathLike, *, overwrite: bool = False) -> None:
        """Move an entry, keeping its identifier.

        With ``overwrite`` an existing destination is destroyed and replaced in
        the same step; all checks run before anything is detached.
        """

        old_segments = to_segments(old_path)
        new_segments = to_segments(new_path)
        old_display = format_path(old_segments)
        new_display = format_path(new_segments)
        if not old_segments or not new_segments:
            raise ValueError("The root directory cannot be renamed")

        entry = self._lookup(old_segments)
        entry_id = entry.entry_id
        old_parent = self._lookup_parent(old_segments)
        old_name = old_segments[-1]
        new_parent = self._lookup_parent(new_segments)
        new_name = new_segments[-1]
        target_id = new_parent.children.get(new_name)

        if target_id == entry_id:
            return
        if entry.kind is EntryKind.DIRECTORY and is_ancestor(old_segments, new_segments):
            raise ValueError(f"Cannot move {old_display} into its own subtree")
        if target_id is not None and not overwrite:
            raise EntryExists(new_display)
        if is_ancestor(new_segments, old_segments):
            raise ValueError(f"Cannot replace {new_display} with its own descendant")

        changes: List[ChangeEvent] = []
        if target_id is not None:
            del new_parent.children[new_name]
            self._discard_subtree(target_id)
            changes.append(ChangeEvent(ChangeType.DELETED, new_display, entry_id=target_id))

        now = self._clock()
        del old_parent.children[old_name]
        entry.name = new_name
        new_parent.children[new_name] = entry_id
        old_parent.mtime = now
        new_parent.mtime = now
        changes.append(ChangeEvent(ChangeType.RENAMED, new_display, previous_path=old_display, entry_id=entry_id))
        logger.debug("Renamed %s to %s", old_display, new_display)
        self._notifier.fire_soon(*changes)

    # -- internals --

    def _new_file(self, name: str, now: float) -> File:
        entry = File(entry_id=next(_ENTRY_IDS), name=name, ctime=now, mtime=now)
        self._entries[entry.entry_id] = entry
        return entry

    def _new_directory(self, name: str, now: Optional[float] = None) -> Directory:
        if now is None:
            now = self._clock()
        entry = Directory(entry_id=next(_ENTRY_IDS), name=name, ctime=now, mtime=now)
        self._entries[entry.entry_id] = entry
        return entry

    def _lookup(self, segments: Segments) -> Entry:
        entry: Entry = self._root
        for name in segments:
            child_id = entry.children.get(name) if entry.kind is EntryKind.DIRECTORY else None
            if child_id is None:
                raise EntryNotFound(format_path(segments))
            entry = self._entries[child_id]
        return entry

    def _lookup_directory(self, segments: Segments) -> Directory:
        entry = self._lookup(segments)
        if entry.kind is not EntryKind.DIRECTORY:
            raise NotADirectory(format_path(segments))
        return entry

    def _lookup_parent(self, segments: Segments) -> Directory:
        return self._lookup_directory(parent_of(segments))

    def _discard_subtree(self, entry_id: int) -> int:
        removed = 0
        stack = [entry_id]
        while stack:
            entry = self._entries.pop(stack.pop())
            removed += 1
            if entry.kind is EntryKind.DIRECTORY:
                stack.extend(entry.children.values())
        return removed
