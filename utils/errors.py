class BotError(Exception):
    """Base class for errors that are reported back to the chat user."""


class ExpiredFlow(BotError):
    """A cache entry a step depends on is gone (expired or never set)."""

    def __init__(self, message="something went wrong, try searching again"):
        super().__init__(message)


class SelectionNotFound(BotError):
    """The user's reply matched none of the offered options."""


class NotAuthorized(BotError):
    pass


class AdminOnly(BotError):
    pass


class AccessRevoked(BotError):
    pass


class AlreadyAuthorized(BotError):
    pass


class SonarrError(BotError):
    """Sonarr could not be reached or rejected the request."""
