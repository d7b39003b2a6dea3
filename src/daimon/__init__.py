"""A handy little note-taking assistant that keeps notes as plain files in the filesystem.

If you installed via ``pip``, run ``daimon help`` to get help.
Or, run ``python3 -m daimon help``.

To use the Python API, look at :class:`daimon.api.Daimon`
"""
