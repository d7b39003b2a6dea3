"""Provides the main entry point for using the library, :class:`Daimon`"""

from __future__ import annotations
import logging
import shlex
import subprocess
from typing import Iterator, List

from daimon.conf import DaimonConf
from daimon.models import ListingReq, ListingReqIsh
from daimon.stores.base import clean_logical_path, parent_of


logger = logging.getLogger(__name__)


class Error(Exception):
    pass


class EditorError(Error):
    """Raised when the editor cannot be started or exits unsuccessfully."""


class Daimon:
    """Main entry point for working programmatically with your notes and projects.

    Generally, you should get an instance using the :meth:`Daimon.for_user` method. Call :meth:`close` when you're
    done with it, or else use it as a context manager.

    Names passed to every method are logical paths like ``"work/standup"``; ``"."`` is the root project.
    Errors from the store (:exc:`daimon.stores.base.StoreError` and subclasses) propagate unchanged.

    .. attribute:: conf
       :type: daimon.conf.DaimonConf

    .. attribute:: store
       :type: daimon.stores.base.Store

    Here's an example that files every note in the root under an ``inbox`` project:

    .. code-block:: python

       from daimon.api import Daimon
       with Daimon.for_user() as dm:
           for name in dm.list_notes():
               dm.rename_note(name, f'inbox/{name}')
    """

    @staticmethod
    def for_user() -> Daimon:
        """Creates an instance configured from the environment.

        Raises :exc:`daimon.conf.ConfError` if ``DAIMON_DIR`` is not set.
        """
        return DaimonConf.for_user().instantiate()

    def __init__(self, conf: DaimonConf):
        self.conf = conf
        self.store = conf.store_conf.instantiate()

    def create_note(self, name: str, body: str) -> None:
        """Appends the body plus a newline to the note, creating it and its projects if needed.

        Calling this twice with the same name keeps both bodies.
        """
        self.store.write_append(name, body + '\n')

    def read_note(self, name: str) -> bytes:
        with self.store.open_for_read(name) as file:
            return file.read()

    def edit_note(self, name: str) -> None:
        """Opens the note in the configured editor and waits for it to exit.

        The note's project is created first so the editor can save a new note. The editor shares this
        process's terminal. Raises :exc:`EditorError` if it cannot be started or exits
        with a non-zero status.
        """
        path = self.store.resolve_note(name)
        if not self.store.has_physical_paths():
            raise EditorError(f'Notes in this store cannot be opened by an editor: {name}')
        self.store.ensure_dir(parent_of(name))
        try:
            args = shlex.split(self.conf.editor) + [path]
        except ValueError as e:
            raise EditorError(f'Could not parse editor command {self.conf.editor!r}: {e}') from e
        logger.debug('launching editor: %s', args)
        try:
            subprocess.run(args, check=True)
        except subprocess.CalledProcessError as e:
            raise EditorError(f'Editor exited with status {e.returncode}') from e
        except OSError as e:
            raise EditorError(f'Could not start editor {args[0]}: {e}') from e

    def rename_note(self, old: str, new: str) -> None:
        self.store.rename(old, new)

    def delete_note(self, name: str) -> None:
        self.store.remove(name)

    def create_project(self, name: str) -> None:
        self.store.ensure_dir(name)

    def delete_project(self, name: str) -> None:
        """Deletes the project and everything in it. Deleting a project that does not exist is not an error."""
        self.store.remove_tree(name)

    def list_notes(self, project: str = '.') -> List[str]:
        """Returns the names of the notes directly inside the project, without the ``.md`` suffix."""
        return [e.name for e in self.store.list_dir(project) if not e.is_project]

    def list_projects(self, project: str = '.') -> List[str]:
        """Returns the names of the projects directly inside the project."""
        return [e.name for e in self.store.list_dir(project) if e.is_project]

    def walk(self, fields: ListingReqIsh, project: str = '.') -> Iterator[str]:
        """Yields logical paths of everything beneath the project, depth first.

        ``fields`` decides what is emitted (see :class:`daimon.models.ListingReq`); every sub-project is
        descended into regardless. Within each project the notes come first, then each sub-project
        followed by its contents. Projects are labelled with a trailing ``/``.

        Paths are relative to the root, so walking ``"a"`` yields names like ``"a/b/"``.
        """
        fields = ListingReq.parse(fields)
        project = clean_logical_path(project)
        base = '' if project == '.' else project + '/'
        entries = list(self.store.list_dir(project))
        if fields.notes:
            for entry in entries:
                if not entry.is_project:
                    yield base + entry.label()
        for entry in entries:
            if entry.is_project:
                if fields.projects:
                    yield base + entry.label()
                yield from self.walk(fields, base + entry.name)

    def list_all_notes(self, project: str = '.') -> List[str]:
        return list(self.walk(ListingReq(notes=True), project))

    def list_all_projects(self, project: str = '.') -> List[str]:
        return list(self.walk(ListingReq(projects=True), project))

    def list_all(self, project: str = '.') -> List[str]:
        """Returns every note and project beneath the project; projects end with ``/``."""
        return list(self.walk(ListingReq.everything(), project))

    def close(self):
        """Closes the associated store and releases any other resources."""
        self.store.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.store.close()
