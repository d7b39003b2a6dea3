"""Configuration for daimon, normally read from environment variables.

``DAIMON_DIR`` (required) names the directory notes live in, ``EDITOR`` picks the program used by the
``e`` command, and ``DAIMON_HISTORY`` moves the interactive mode's history file.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
import os
import os.path
from typing import Mapping, Optional


ROOT_ENV = 'DAIMON_DIR'
EDITOR_ENV = 'EDITOR'
HISTORY_ENV = 'DAIMON_HISTORY'

DEFAULT_EDITOR = 'vim'
DEFAULT_HISTORY = os.path.join('~', '.daimon_history')


class ConfError(Exception):
    """Raised when required configuration is missing."""


@dataclass
class StoreConf:
    """Base class for store config. Use a subclass such as :class:`FSStoreConf`."""

    def instantiate(self):
        raise NotImplementedError("Please use a subclass like FSStoreConf instead!")

    def standardize(self):
        return self


@dataclass
class FSStoreConf(StoreConf):
    """Configures daimon to keep notes on disk, via :class:`daimon.stores.fs.FSStore`."""

    root: str = None
    """Required. The directory all notes and projects live under.

    :meth:`standardize` makes it absolute and ensures it ends with a path separator.
    """

    def instantiate(self):
        from daimon.stores.fs import FSStore
        return FSStore(self.standardize().root)

    def standardize(self):
        root = os.path.abspath(os.path.expanduser(self.root))
        if not root.endswith(os.sep):
            root += os.sep
        return replace(self, root=root)


@dataclass
class MemoryStoreConf(StoreConf):
    """Configures daimon to keep notes in memory, via :class:`daimon.stores.memory.MemoryStore`."""

    def instantiate(self):
        from daimon.stores.memory import MemoryStore
        return MemoryStore()


@dataclass
class DaimonConf:
    store_conf: StoreConf
    """Configures where notes are kept."""

    editor: str = DEFAULT_EDITOR
    """Command used to edit notes. It may include arguments (e.g. ``code -w``); the note path is appended."""

    history_path: Optional[str] = DEFAULT_HISTORY
    """File the interactive mode keeps command history in. None disables persistent history."""

    @classmethod
    def for_user(cls, environ: Mapping[str, str] = None) -> DaimonConf:
        """Builds config from environment variables.

        Raises :exc:`ConfError` if ``DAIMON_DIR`` is not set.
        """
        environ = os.environ if environ is None else environ
        root = environ.get(ROOT_ENV)
        if not root:
            raise ConfError(f'{ROOT_ENV} env is not set')
        return cls(
            store_conf=FSStoreConf(root=root),
            editor=environ.get(EDITOR_ENV) or DEFAULT_EDITOR,
            history_path=environ.get(HISTORY_ENV) or DEFAULT_HISTORY,
        )

    def standardize(self):
        return replace(
            self,
            store_conf=self.store_conf.standardize(),
            history_path=os.path.expanduser(self.history_path) if self.history_path else None
        )

    def instantiate(self):
        from daimon.api import Daimon
        return Daimon(self.standardize())
