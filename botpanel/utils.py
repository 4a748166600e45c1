import logging
from typing import Optional

from botpanel.core.exceptions import (
    AuthenticationError,
    BotAPIError,
    BotPanelError,
    ServerUnreachableError,
)

logger = logging.getLogger(__name__)


class ErrorHandler:
    """Centralized error handling for the panel."""

    @staticmethod
    def handle_api_error(operation: str, error: Exception,
                         bot_name: Optional[str] = None) -> str:
        """Log a failed operation and return a message for the operator."""
        error_msg = f"Error during {operation}"
        if bot_name:
            error_msg += f" for bot {bot_name}"
        logger.error(f"{error_msg}: {str(error)}")

        if isinstance(error, ValueError):
            return str(error)
        if isinstance(error, ServerUnreachableError):
            return f"Failed to {operation}: server is not reachable"
        if isinstance(error, AuthenticationError):
            return f"Failed to {operation}: check the API key"
        if isinstance(error, BotAPIError):
            return f"Failed to {operation}: {error.message}"
        if isinstance(error, BotPanelError):
            return f"Failed to {operation}: {error}"
        return f"Failed to {operation}"
