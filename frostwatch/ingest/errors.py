"""Exceptions raised by the station index and upstream API clients."""


class FrostwatchError(Exception):
    """Base exception for advisory engine errors."""


class NormalsConfigError(FrostwatchError):
    """Raised when no NOAA CDO token is configured."""


class StationDataError(FrostwatchError):
    """Raised when the ZIP station dataset cannot be read."""


class UpstreamError(FrostwatchError):
    """Raised when NOAA or NWS returns an error or cannot be reached."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
