"""
Exception taxonomy for street geometry resolution.

"Not found" is never an exception: providers, solvers and extractors return
None for a well-formed lookup that yields nothing.
"""

from typing import List, Optional


class StreetGeometryError(Exception):
    """Base class for all street geometry errors."""
    pass


class ConfigurationError(StreetGeometryError):
    """Raised for invalid configuration or an unknown locality."""
    pass


class OverpassError(StreetGeometryError):
    """Base class for map-data service failures."""

    def __init__(self, message: str, status_code: Optional[int] = None, instance: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.instance = instance


class ClientQueryError(OverpassError):
    """Raised when the service rejects the query itself (not failed over)."""
    pass


class ServerQueryError(OverpassError):
    """Raised when a single service instance fails for server-side reasons."""
    pass


class ServiceUnavailableError(OverpassError):
    """Raised when every configured service instance failed."""

    def __init__(self, message: str, attempts: Optional[List[str]] = None):
        super().__init__(message)
        self.attempts = attempts or []


class GeometryComputationError(StreetGeometryError):
    """Raised when geometric computation fails; converted to None by callers."""
    pass
