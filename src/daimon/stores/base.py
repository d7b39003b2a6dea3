"""Defines the API for storing notes and projects, and the errors stores may raise.

The most important class is :class:`Store`.
"""

import posixpath
import re
from typing import BinaryIO, Iterator, Union

from daimon.models import Entry


NOTE_SUFFIX = '.md'

ILLEGAL_NAME = re.compile(r'^\W')


class StoreError(Exception):
    """Base class for errors raised by a :class:`Store`.

    .. attribute:: path

       The logical or physical path the failed operation was working on.
    """
    def __init__(self, message: str, path: str, cause: BaseException = None):
        super().__init__(message, path)
        self.message = message
        self.path = path
        self.cause = cause

    def __str__(self):
        return f'{self.message}: {self.path}'


class InvalidNameError(StoreError):
    """Raised when a logical path cannot be safely mapped into the root."""


class NotFoundError(StoreError):
    """Raised when the note or project an operation targets does not exist."""


class StoreIOError(StoreError):
    """Raised for permission, disk and other OS-level failures."""


def is_illegal_name(name: str) -> bool:
    """Returns True if the name starts with anything other than a letter, digit or underscore."""
    return bool(ILLEGAL_NAME.match(name))


def clean_logical_path(logical: str) -> str:
    """Validates a logical path and returns its normalized form.

    ``"."`` refers to the root. Any other path must start with a word character, and must not
    climb above the root once ``.`` and ``..`` segments are collapsed. For example,
    ``"a/./b//c"`` becomes ``"a/b/c"``, while ``"a/../../etc"`` is rejected.

    Raises :exc:`InvalidNameError`.
    """
    if not logical:
        raise InvalidNameError('Name must not be empty', logical)
    if logical != '.' and is_illegal_name(logical):
        raise InvalidNameError('Path starts with an invalid character', logical)
    cleaned = posixpath.normpath(logical)
    if cleaned == '..' or cleaned.startswith('../'):
        raise InvalidNameError('Path leads outside the notes directory', logical)
    return cleaned


def clean_note_path(logical: str) -> str:
    """Like :func:`clean_logical_path`, but also requires the last segment to be a legal note name."""
    cleaned = clean_logical_path(logical)
    if is_illegal_name(posixpath.basename(cleaned)):
        raise InvalidNameError('Note name starts with an invalid character', logical)
    return cleaned


def parent_of(logical: str) -> str:
    """Returns the logical path of the project containing the given note or project."""
    return posixpath.dirname(clean_logical_path(logical)) or '.'


class Store:
    """Base class for stores, which are the sole authority for where notes and projects live.

    Every method takes logical paths: slash-separated names relative to the root, where ``"."``
    is the root itself. A note ``a/b`` is kept at ``a/b.md`` and a project ``a`` is a directory.

    Methods raise :exc:`InvalidNameError` for unsafe names before touching anything.
    """

    def resolve(self, logical: str) -> str:
        """Returns the physical path for a project (or any logical path, without the note suffix)."""
        raise NotImplementedError()

    def resolve_note(self, logical: str) -> str:
        """Returns the physical path for a note, including the ``.md`` suffix."""
        raise NotImplementedError()

    def ensure_dir(self, logical: str) -> None:
        """Creates the project and any missing ancestors. Does nothing if it already exists."""
        raise NotImplementedError()

    def open_for_read(self, logical: str) -> BinaryIO:
        """Opens a note for reading. Raises :exc:`NotFoundError` if it does not exist."""
        raise NotImplementedError()

    def open_for_append(self, logical: str) -> BinaryIO:
        """Opens a note for appending, creating it and its parent projects if necessary."""
        raise NotImplementedError()

    def rename(self, old: str, new: str) -> None:
        """Moves a note, creating the destination's parent projects if necessary."""
        raise NotImplementedError()

    def remove(self, logical: str) -> None:
        """Deletes a single note. Raises :exc:`NotFoundError` if it does not exist."""
        raise NotImplementedError()

    def remove_tree(self, logical: str) -> None:
        """Deletes a project and everything in it. Does nothing if it does not exist."""
        raise NotImplementedError()

    def list_dir(self, logical: str) -> Iterator[Entry]:
        """Yields the immediate contents of a project, in storage order.

        Raises :exc:`NotFoundError` if the project does not exist.
        """
        raise NotImplementedError()

    def has_physical_paths(self) -> bool:
        """Returns True if :meth:`resolve_note` points at a real file other programs can open."""
        return False

    def write_append(self, logical: str, data: Union[str, bytes]) -> int:
        """Appends to a note and returns the number of bytes written.

        Strings are encoded as UTF-8, with undecodable command-line bytes restored as-is.
        The note is closed before this returns, even if the write fails.
        """
        if isinstance(data, str):
            data = data.encode('utf-8', 'surrogateescape')
        with self.open_for_append(logical) as file:
            return file.write(data)

    def close(self) -> None:
        """Release any resources associated with the store."""
        pass
