# botpanel/services/bot_service.py
import logging
from typing import List, Optional

from botpanel.models.bot import Bot, GroupModel
from botpanel.models.dto import ActionResult, AttendanceFile, BotStatus
from botpanel.services.api_client import APIClient
from botpanel.services.bot_store import InMemoryBotStore

logger = logging.getLogger(__name__)


class BotService:
    """Keeps a stored bot in step with what the server reports.

    Changes are made on a copy of the bot and only replace ``self.bot``
    once the store has written them.
    """

    def __init__(self, bot: Bot, store: InMemoryBotStore,
                 api_client: Optional[APIClient] = None):
        self.bot = bot
        self.store = store
        self.api_client = api_client or APIClient.from_bot(bot)

    def _draft(self) -> Bot:
        return self.bot.model_copy(deep=True)

    def _commit(self, draft: Bot) -> Bot:
        self.bot = self.store.save(draft)
        return self.bot

    def save(self) -> Bot:
        return self._commit(self._draft())

    def update_connection(self, server_ip: str, api_key: str) -> None:
        """Point the bot at another server and rebuild the client."""
        api_client = APIClient(server_ip, api_key.strip())
        draft = self._draft()
        draft.api_client.server_ip = server_ip.strip()
        draft.api_client.api_key = api_key.strip()
        self._commit(draft)
        self.api_client = api_client

    def update_credentials(self, token: str, dev_token: str,
                           role: str) -> None:
        draft = self._draft()
        draft.token = token.strip()
        draft.dev_token = dev_token.strip()
        draft.role = role.strip()
        self._commit(draft)

    def start(self) -> ActionResult:
        token = self.bot.active_token
        if not token:
            mode = "developer" if self.bot.is_developer_mode else "production"
            raise ValueError(f"No {mode} token configured")

        result = self.api_client.start_bot(token, self.bot.is_developer_mode)
        if result.success:
            draft = self._draft()
            draft.is_active = True
            self._commit(draft)
            logger.info(f"Bot {self.bot.name} started")
        return result

    def stop(self) -> ActionResult:
        result = self.api_client.stop_bot()
        if result.success:
            draft = self._draft()
            draft.is_active = False
            for group in draft.groups:
                group.attendance_active = False
            self._commit(draft)
            logger.info(f"Bot {self.bot.name} stopped")
        return result

    def refresh_status(self) -> BotStatus:
        status = self.api_client.get_status()
        if status.running != self.bot.is_active:
            draft = self._draft()
            draft.is_active = status.running
            self._commit(draft)
        return status

    def rename(self, name: str) -> ActionResult:
        name = name.strip()
        if not name:
            raise ValueError("Bot name must not be empty")
        result = self.api_client.set_bot_name(name)
        if result.success:
            draft = self._draft()
            draft.name = name
            self._commit(draft)
        return result

    def toggle_developer_mode(self, enabled: bool) -> None:
        if self.bot.is_active and enabled != self.bot.is_developer_mode:
            raise ValueError("Stop the bot before switching modes")
        draft = self._draft()
        draft.is_developer_mode = enabled
        self._commit(draft)

    def add_group(self, name: str) -> GroupModel:
        draft = self._draft()
        group = draft.add_group(name)
        self._commit(draft)
        return group

    def remove_group(self, name: str) -> bool:
        group = self.bot.get_group(name)
        if group is None:
            return False
        if group.attendance_active:
            raise ValueError(f"Attendance is still running for '{group.name}'")
        draft = self._draft()
        draft.remove_group(name)
        self._commit(draft)
        return True

    def validate_groups(self) -> List[GroupModel]:
        """Ask the server which groups exist and store the answer."""
        draft = self._draft()
        for group in draft.groups:
            group.is_valid = self.api_client.validate_group(group.name).valid
        return self._commit(draft).groups

    def start_attendance(self, group_name: str,
                         channel_id: str) -> ActionResult:
        group = self._require_group(group_name)
        if not group.is_valid:
            raise ValueError(f"Group '{group.name}' has not been validated")
        running = self.bot.attendance_group
        if running is not None:
            raise ValueError(f"Attendance already running for '{running.name}'")

        result = self.api_client.start_attendance(group.name, channel_id)
        if result.success:
            draft = self._draft()
            draft.get_group(group.name).attendance_active = True
            self._commit(draft)
        return result

    def stop_attendance(self, group_name: str) -> AttendanceFile:
        group = self._require_group(group_name)
        if not group.attendance_active:
            raise ValueError(f"No attendance running for '{group.name}'")

        attendance_file = self.api_client.stop_attendance(group.name)
        draft = self._draft()
        draft.get_group(group.name).attendance_active = False
        self._commit(draft)
        logger.info(
            f"Attendance for {group.name} saved to {attendance_file.filename}")
        return attendance_file

    def _require_group(self, name: str) -> GroupModel:
        group = self.bot.get_group(name)
        if group is None:
            raise ValueError(f"Unknown group '{name}'")
        return group
