from typing import Optional


class RankError(Exception):
    """Base class for every failure that ends a rank lookup."""


class OptionMissing(RankError):
    def __init__(self, option: str, reason: str = "missing"):
        self.option = option
        self.reason = reason
        super().__init__(f"Option '{option}' is {reason}")


class NetworkError(RankError):
    """Transport failure or an unsuccessful HTTP status."""

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)


class Cancelled(RankError):
    """The request did not complete before its deadline."""


class DecodeError(RankError):
    """The response body is not JSON or does not match the expected schema."""


class PlayerNotFound(RankError):
    pass
