"""Maps logical note/project names to storage and performs the raw I/O.

:class:`daimon.stores.base.Store` defines an API.
:class:`daimon.stores.fs.FSStore` keeps notes as files under a root directory, while
:class:`daimon.stores.memory.MemoryStore` keeps them in memory.
"""
