import logging

import pytest

from botpanel.core.exceptions import (
    AuthenticationError,
    ServerError,
    ServerUnreachableError,
    StoreError,
)
from botpanel.utils import ErrorHandler


@pytest.mark.parametrize("error, expected", [
    (ServerUnreachableError("down"), "Failed to start bot: server is not reachable"),
    (AuthenticationError("bad key", 401), "Failed to start bot: check the API key"),
    (ServerError("Server error 500: boom", 500), "Failed to start bot: Server error 500: boom"),
    (ValueError("No production token configured"), "No production token configured"),
    (StoreError("Bot store ./bots.json is not writable: disk full"),
     "Failed to start bot: Bot store ./bots.json is not writable: disk full"),
    (RuntimeError("?"), "Failed to start bot"),
])
def test_handle_api_error_messages(error, expected):
    assert ErrorHandler.handle_api_error("start bot", error) == expected


def test_handle_api_error_logs(caplog):
    with caplog.at_level(logging.ERROR):
        ErrorHandler.handle_api_error("clear messages", ServerError("x"), "Tutor")
    assert "Error during clear messages for bot Tutor: x" in caplog.text
