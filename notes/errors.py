"""Typed failures raised by the record store."""


class StoreError(Exception):
    """Base class for every record store failure."""


class StorageUnavailable(StoreError):
    """The database location cannot be resolved or the file cannot be opened."""


class ReadError(StoreError):
    """A query failed while reading rows."""


class WriteError(StoreError):
    """An insert, update or delete failed."""
