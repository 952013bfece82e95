from __future__ import annotations


class PathfinderError(Exception):
    """Base class for errors raised by pathfinder."""


class ApiError(PathfinderError):
    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(ApiError):
    pass


class TransportError(ApiError):
    """The API could not be reached at all."""


class OracleError(PathfinderError):
    """The generative-AI backend failed to answer."""


class OracleOutputError(OracleError):
    """The backend answered, but not in the shape that was asked for."""
