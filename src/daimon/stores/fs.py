"""Provides the :class:`FSStore` class."""

import logging
import os
import os.path
import shutil
from typing import BinaryIO, Iterator

from daimon.models import Entry
from daimon.stores.base import Store, NOTE_SUFFIX, NotFoundError, StoreIOError, InvalidNameError,\
    clean_logical_path, clean_note_path, is_illegal_name, parent_of


logger = logging.getLogger(__name__)

DIR_MODE = 0o750
NOTE_MODE = 0o640


def _makedirs(path: str) -> None:
    # os.makedirs only applies the mode to the leaf directory
    path = path.rstrip(os.sep) or os.sep
    head, tail = os.path.split(path)
    if head and tail and not os.path.exists(head):
        _makedirs(head)
    try:
        os.mkdir(path, DIR_MODE)
    except FileExistsError:
        if not os.path.isdir(path):
            raise


class FSStore(Store):
    """Keeps notes as ``.md`` files and projects as directories beneath a root directory.

    Nothing is cached; every call goes straight to the filesystem, and OS errors are wrapped in
    :exc:`daimon.stores.base.StoreError` subclasses carrying the offending path.

    .. attribute:: root
       :type: str

       Absolute path of the root directory, ending with a separator.
    """
    def __init__(self, root: str):
        if not root:
            raise ValueError('`root` must be non-empty for FSStore.')
        self.root = root

    def has_physical_paths(self) -> bool:
        return True

    def resolve(self, logical: str) -> str:
        cleaned = clean_logical_path(logical)
        if cleaned == '.':
            return self.root
        return os.path.join(self.root, *cleaned.split('/'))

    def resolve_note(self, logical: str) -> str:
        clean_note_path(logical)
        return self.resolve(logical) + NOTE_SUFFIX

    def ensure_dir(self, logical: str) -> None:
        path = self.resolve(logical)
        try:
            _makedirs(path)
        except OSError as e:
            raise StoreIOError('Could not create project', path, e) from e
        logger.debug('ensured directory %s', path)

    def open_for_read(self, logical: str) -> BinaryIO:
        path = self.resolve_note(logical)
        try:
            return open(path, 'rb')
        except FileNotFoundError as e:
            raise NotFoundError('Note does not exist', logical, e) from e
        except OSError as e:
            raise StoreIOError('Could not open note', path, e) from e

    def open_for_append(self, logical: str) -> BinaryIO:
        path = self.resolve_note(logical)
        self.ensure_dir(parent_of(logical))
        try:
            fd = os.open(path, os.O_APPEND | os.O_CREAT | os.O_WRONLY, NOTE_MODE)
            return os.fdopen(fd, 'ab')
        except OSError as e:
            raise StoreIOError('Could not open note for writing', path, e) from e

    def write_append(self, logical, data) -> int:
        written = super().write_append(logical, data)
        logger.debug('appended %d bytes to %s', written, self.resolve_note(logical))
        return written

    def rename(self, old: str, new: str) -> None:
        src = self.resolve_note(old)
        dest = self.resolve_note(new)
        if not os.path.isfile(src):
            raise NotFoundError('Note does not exist', old)
        self.ensure_dir(parent_of(new))
        try:
            os.rename(src, dest)
        except OSError as e:
            raise StoreIOError('Could not move note', src, e) from e
        logger.debug('renamed %s to %s', src, dest)

    def remove(self, logical: str) -> None:
        path = self.resolve_note(logical)
        try:
            os.remove(path)
        except FileNotFoundError as e:
            raise NotFoundError('Note does not exist', logical, e) from e
        except OSError as e:
            raise StoreIOError('Could not delete note', path, e) from e
        logger.debug('removed %s', path)

    def remove_tree(self, logical: str) -> None:
        if clean_logical_path(logical) == '.':
            raise InvalidNameError('Refusing to delete the root project', logical)
        path = self.resolve(logical)
        if not os.path.lexists(path):
            return
        try:
            shutil.rmtree(path)
        except OSError as e:
            raise StoreIOError('Could not delete project', path, e) from e
        logger.debug('removed tree %s', path)

    def list_dir(self, logical: str) -> Iterator[Entry]:
        path = self.resolve(logical)
        try:
            entries = list(os.scandir(path))
        except (FileNotFoundError, NotADirectoryError) as e:
            raise NotFoundError('Project does not exist', logical, e) from e
        except OSError as e:
            raise StoreIOError('Could not list project', path, e) from e
        for entry in entries:
            if is_illegal_name(entry.name):
                continue
            if entry.is_dir(follow_symlinks=False):
                yield Entry(entry.name, is_project=True)
            elif entry.name.endswith(NOTE_SUFFIX) and entry.is_file():
                name = entry.name[:-len(NOTE_SUFFIX)]
                if name and not is_illegal_name(name):
                    yield Entry(name)
