from __future__ import annotations


class SalesError(Exception):
    """Base class for errors surfaced to callers of the sales core."""

    status_code = 400


class InvalidInput(SalesError):
    status_code = 400


class NotFound(SalesError):
    status_code = 404


class Conflict(SalesError):
    status_code = 409


class InvalidState(SalesError):
    status_code = 409
