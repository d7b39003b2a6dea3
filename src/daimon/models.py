"""Defines classes for representing project contents and listing requests."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Union


@dataclass(frozen=True)
class Entry:
    """One item inside a project, as returned by :meth:`daimon.stores.base.Store.list_dir`."""

    name: str
    """The entry's name within its project, without any note suffix."""

    is_project: bool = False
    """True for sub-projects, False for notes."""

    def label(self) -> str:
        """Returns the name as shown in listings: projects get a trailing slash."""
        return f'{self.name}/' if self.is_project else self.name


@dataclass(frozen=True)
class ListingReq:
    """Specifies which kinds of entries a recursive listing should emit.

    Sub-projects are always descended into; these flags only control what is yielded.
    Some methods that take a ListingReq parameter also accept strings or lists of strings,
    which they will pass to :meth:`parse`.
    """

    notes: bool = False
    projects: bool = False

    @classmethod
    def parse(cls, val: ListingReqIsh) -> ListingReq:
        """Converts the parameter to a ListingReq, if it isn't one already.

        You can pass a comma-separated string like ``"notes,projects"`` or a list of strings like
        ``['notes']``.
        """
        if isinstance(val, ListingReq):
            return val
        if isinstance(val, str):
            return cls.parse(s.strip() for s in val.split(',') if s.strip())
        return cls(**{k: True for k in val})

    @classmethod
    def everything(cls) -> ListingReq:
        return cls(notes=True, projects=True)


ListingReqIsh = Union[str, Iterable[str], ListingReq]
