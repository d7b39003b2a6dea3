"""Provides the :class:`MemoryStore` class."""

import io
import posixpath
from typing import BinaryIO, Dict, Iterator, Set

from daimon.models import Entry
from daimon.stores.base import Store, NOTE_SUFFIX, NotFoundError, InvalidNameError, clean_logical_path,\
    clean_note_path


def _parent(cleaned: str) -> str:
    return posixpath.dirname(cleaned) or '.'


class _AppendBuffer(io.BytesIO):
    """Collects appended bytes and commits them to the owning store when closed."""
    def __init__(self, store, key: str):
        super().__init__()
        self._store = store
        self._key = key

    def close(self):
        if not self.closed:
            self._store.notes[self._key] += self.getvalue()
        super().close()


class MemoryStore(Store):
    """Keeps notes and projects in memory. Nothing survives the process.

    Paths returned by :meth:`resolve` are virtual; external programs such as editors cannot open them.

    .. attribute:: notes
       :type: Dict[str, bytes]

       Note contents keyed by normalized logical path.

    .. attribute:: projects
       :type: Set[str]

       Normalized logical paths of every project, always including the root ``"."``.
    """
    def __init__(self):
        self.notes: Dict[str, bytes] = {}
        self.projects: Set[str] = {'.'}

    def resolve(self, logical: str) -> str:
        cleaned = clean_logical_path(logical)
        return '/' if cleaned == '.' else f'/{cleaned}'

    def resolve_note(self, logical: str) -> str:
        return self.resolve(clean_note_path(logical)) + NOTE_SUFFIX

    def ensure_dir(self, logical: str) -> None:
        cleaned = clean_logical_path(logical)
        while cleaned not in self.projects:
            self.projects.add(cleaned)
            cleaned = _parent(cleaned)

    def open_for_read(self, logical: str) -> BinaryIO:
        key = clean_note_path(logical)
        if key not in self.notes:
            raise NotFoundError('Note does not exist', logical)
        return io.BytesIO(self.notes[key])

    def open_for_append(self, logical: str) -> BinaryIO:
        key = clean_note_path(logical)
        self.ensure_dir(_parent(key))
        self.notes.setdefault(key, b'')
        return _AppendBuffer(self, key)

    def rename(self, old: str, new: str) -> None:
        src = clean_note_path(old)
        dest = clean_note_path(new)
        if src not in self.notes:
            raise NotFoundError('Note does not exist', old)
        self.ensure_dir(_parent(dest))
        self.notes[dest] = self.notes.pop(src)

    def remove(self, logical: str) -> None:
        key = clean_note_path(logical)
        if key not in self.notes:
            raise NotFoundError('Note does not exist', logical)
        del self.notes[key]

    def remove_tree(self, logical: str) -> None:
        cleaned = clean_logical_path(logical)
        if cleaned == '.':
            raise InvalidNameError('Refusing to delete the root project', logical)
        prefix = cleaned + '/'
        self.projects = {p for p in self.projects if not (p == cleaned or p.startswith(prefix))}
        for key in [k for k in self.notes if k.startswith(prefix)]:
            del self.notes[key]

    def list_dir(self, logical: str) -> Iterator[Entry]:
        cleaned = clean_logical_path(logical)
        if cleaned not in self.projects:
            raise NotFoundError('Project does not exist', logical)
        for project in sorted(self.projects):
            if project != '.' and _parent(project) == cleaned:
                yield Entry(posixpath.basename(project), is_project=True)
        for key in list(self.notes):
            if _parent(key) == cleaned:
                yield Entry(posixpath.basename(key))
