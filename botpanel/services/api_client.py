import logging
from typing import Any, Dict, List, Optional, Type, TypeVar
from urllib.parse import quote, urlsplit

import requests
from pydantic import BaseModel, ValidationError

from botpanel.core.config import settings
from botpanel.core.exceptions import (
    AuthenticationError,
    DecodeError,
    NotFoundError,
    ServerError,
    ServerUnreachableError,
)
from botpanel.models.bot import Bot
from botpanel.models.dto import (
    ActionResult,
    AttendanceFile,
    BotStatus,
    Channel,
    ClearResult,
    GroupValidation,
    Member,
    Role,
    RoleAssignment,
    SurveyFile,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def normalize_base_url(server_ip: str) -> str:
    raw = server_ip.strip()
    if not raw:
        raise ValueError("Server address must not be empty")
    base_url = raw if "://" in raw else f"http://{raw}"
    base_url = base_url.rstrip("/")

    invalid = ValueError(f"Invalid server address '{raw}'")
    if any(c.isspace() for c in base_url):
        raise invalid
    parts = urlsplit(base_url)
    try:
        parts.port
    except ValueError as e:
        raise invalid from e
    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise invalid
    return base_url


class APIClient:
    """Handles communication with the bot server."""

    def __init__(self, server_ip: str, api_key: str,
                 timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        self.base_url = normalize_base_url(server_ip)
        self.api_key = api_key
        self.timeout = settings.REQUEST_TIMEOUT if timeout is None else timeout
        self.session = session or requests.Session()

    @classmethod
    def from_bot(cls, bot: Bot, **kwargs) -> "APIClient":
        return cls(bot.api_client.server_ip, bot.api_client.api_key, **kwargs)

    # -- transport -------------------------------------------------------

    def _request(self, method: str, path: str,
                 params: Optional[Dict[str, Any]] = None,
                 json: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json,
                headers={"X-API-Key": self.api_key},
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise ServerUnreachableError(
                f"Could not reach server at {self.base_url}") from e

        if response.status_code in (401, 403):
            raise AuthenticationError(
                "The server rejected the API key", response.status_code)
        if response.status_code == 404:
            raise NotFoundError(
                f"Not found: {path}", response.status_code)
        if not response.ok:
            detail = self._error_detail(response)
            logger.error(f"{method} {url} -> {response.status_code}: {detail}")
            raise ServerError(
                f"Server error {response.status_code}: {detail}",
                response.status_code
            )

        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(
                f"Server sent a non-JSON response for {path}",
                response.status_code
            ) from e

    @staticmethod
    def _error_detail(response) -> str:
        try:
            body = response.json()
        except ValueError:
            return (response.text or "").strip()[:200] or "no details"
        if isinstance(body, dict):
            for key in ("detail", "error", "message"):
                if body.get(key):
                    return str(body[key])
        return str(body)[:200]

    @staticmethod
    def _decode(model: Type[M], payload: Any) -> M:
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise DecodeError(
                f"Unexpected {model.__name__} payload: {e.error_count()} errors"
            ) from e

    @classmethod
    def _decode_list(cls, model: Type[M], payload: Any, key: str) -> List[M]:
        # Lists arrive either bare or wrapped as {"<key>": [...]}
        if isinstance(payload, dict):
            payload = payload.get(key)
        if not isinstance(payload, list):
            raise DecodeError(f"Expected a list of {key}")
        return [cls._decode(model, item) for item in payload]

    @staticmethod
    def _file_path(prefix: str, filename: str) -> str:
        if not filename.strip():
            raise ValueError("File name must not be empty")
        return f"{prefix}/{quote(filename, safe='')}"

    # -- bot process -----------------------------------------------------

    def get_status(self) -> BotStatus:
        """Fetch the bot process status."""
        return self._decode(BotStatus, self._request("GET", "/status"))

    def ping(self) -> bool:
        """Check whether the server answers at all."""
        try:
            self.get_status()
        except ServerUnreachableError:
            return False
        return True

    def start_bot(self, token: str, developer_mode: bool = False) -> ActionResult:
        payload = {"token": token, "developer_mode": developer_mode}
        return self._decode(
            ActionResult, self._request("POST", "/bot/start", json=payload))

    def stop_bot(self) -> ActionResult:
        return self._decode(ActionResult, self._request("POST", "/bot/stop"))

    def set_bot_name(self, name: str) -> ActionResult:
        return self._decode(
            ActionResult,
            self._request("POST", "/bot/name", json={"name": name})
        )

    # -- guild data ------------------------------------------------------

    def fetch_members(self, role: Optional[str] = None) -> List[Member]:
        """Fetch guild members, optionally only those holding a role."""
        params = {"role": role} if role else None
        payload = self._request("GET", "/members", params=params)
        return self._decode_list(Member, payload, "members")

    def fetch_roles(self) -> List[Role]:
        return self._decode_list(Role, self._request("GET", "/roles"), "roles")

    def fetch_channels(self) -> List[Channel]:
        payload = self._request("GET", "/channels")
        return self._decode_list(Channel, payload, "channels")

    def assign_role(self, role: str, members: List[str]) -> RoleAssignment:
        return self._change_role("/roles/assign", role, members)

    def remove_role(self, role: str, members: List[str]) -> RoleAssignment:
        return self._change_role("/roles/remove", role, members)

    def _change_role(self, path: str, role: str,
                     members: List[str]) -> RoleAssignment:
        if not role:
            raise ValueError("A role is required")
        if not members:
            raise ValueError("Select at least one member")
        payload = {"role": role, "members": list(members)}
        return self._decode(
            RoleAssignment, self._request("POST", path, json=payload))

    # -- messages --------------------------------------------------------

    def clear_messages(self, channel_id: str,
                       limit: Optional[int] = None) -> ClearResult:
        """Delete recent messages in a channel; no limit clears all."""
        if limit is not None and limit <= 0:
            raise ValueError("Limit must be a positive number")
        payload = {"channel_id": channel_id, "limit": limit}
        return self._decode(
            ClearResult, self._request("POST", "/messages/clear", json=payload))

    def send_message(self, channel_id: str, content: str) -> ActionResult:
        if not content.strip():
            raise ValueError("Message must not be empty")
        payload = {"channel_id": channel_id, "content": content}
        return self._decode(
            ActionResult, self._request("POST", "/messages/send", json=payload))

    # -- groups & attendance ---------------------------------------------

    def validate_group(self, name: str) -> GroupValidation:
        payload = self._request(
            "GET", "/groups/validate", params={"name": name})
        return self._decode(GroupValidation, payload)

    def start_attendance(self, group: str, channel_id: str) -> ActionResult:
        payload = {"group": group, "channel_id": channel_id}
        return self._decode(
            ActionResult,
            self._request("POST", "/attendance/start", json=payload)
        )

    def stop_attendance(self, group: str) -> AttendanceFile:
        """Stop attendance for a group and return the written file."""
        payload = self._request(
            "POST", "/attendance/stop", json={"group": group})
        return self._decode(AttendanceFile, payload)

    def fetch_attendance_files(self) -> List[AttendanceFile]:
        payload = self._request("GET", "/attendance/files")
        return self._decode_list(AttendanceFile, payload, "files")

    def fetch_attendance_file(self, filename: str) -> AttendanceFile:
        path = self._file_path("/attendance/files", filename)
        return self._decode(AttendanceFile, self._request("GET", path))

    def delete_attendance_file(self, filename: str) -> ActionResult:
        path = self._file_path("/attendance/files", filename)
        return self._decode(ActionResult, self._request("DELETE", path))

    # -- surveys ---------------------------------------------------------

    def create_survey(self, title: str, options: List[str], channel_id: str,
                      duration_minutes: Optional[int] = None) -> ActionResult:
        """Post a survey to a channel."""
        title = title.strip()
        if not title:
            raise ValueError("Survey title must not be empty")
        cleaned = []
        for option in options:
            option = option.strip()
            if option and option not in cleaned:
                cleaned.append(option)
        if len(cleaned) < 2:
            raise ValueError("A survey needs at least two different options")
        if duration_minutes is not None and duration_minutes <= 0:
            raise ValueError("Duration must be a positive number of minutes")

        payload = {
            "title": title,
            "options": cleaned,
            "channel_id": channel_id,
            "duration": duration_minutes
        }
        return self._decode(
            ActionResult, self._request("POST", "/surveys", json=payload))

    def fetch_survey_files(self) -> List[SurveyFile]:
        payload = self._request("GET", "/surveys/files")
        return self._decode_list(SurveyFile, payload, "files")

    def fetch_survey_file(self, filename: str) -> SurveyFile:
        path = self._file_path("/surveys/files", filename)
        return self._decode(SurveyFile, self._request("GET", path))

    def delete_survey_file(self, filename: str) -> ActionResult:
        path = self._file_path("/surveys/files", filename)
        return self._decode(ActionResult, self._request("DELETE", path))
