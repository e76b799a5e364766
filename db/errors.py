"""
db/errors.py
------------
Failure taxonomy for the data store.
Raised by the db and repository layers, translated into user-facing
messages only by the service layer.
"""


class StoreError(Exception):
    """Base class for any failure talking to the relational store."""


class StoreConnectionError(StoreError):
    """The store could not be reached (pool initialization failed)."""


class QueryError(StoreError):
    """A single repository operation failed."""
