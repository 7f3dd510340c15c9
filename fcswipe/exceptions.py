"""Custom exception hierarchy for fcswipe."""


class FcswipeError(Exception):
    """Base exception for all fcswipe errors."""


class FetchError(FcswipeError):
    """Failed to reach the profile API."""


class ParseError(FcswipeError):
    """Failed to decode or map the API response."""


class ActionNotAvailableError(FcswipeError):
    """User action is not offered on the current screen."""

