# botpanel/core/exceptions.py
from typing import Optional


class BotPanelError(Exception):
    """Base error for the panel."""


class StoreError(BotPanelError):
    """The bot store file could not be read or written."""


class BotAPIError(BotPanelError):
    """A request to the bot server failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ServerUnreachableError(BotAPIError):
    pass


class AuthenticationError(BotAPIError):
    pass


class NotFoundError(BotAPIError):
    pass


class ServerError(BotAPIError):
    pass


class DecodeError(BotAPIError):
    """The server answered, but not with the expected JSON shape."""
