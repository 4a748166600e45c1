# botpanel/services/bot_store.py
import json
import logging
import os
import tempfile
from typing import Dict, List, Optional

from pydantic import ValidationError

from botpanel.core.config import settings
from botpanel.core.exceptions import StoreError
from botpanel.models.bot import ApiClientConfig, Bot

logger = logging.getLogger(__name__)


class InMemoryBotStore:
    """Keeps bots in insertion order; groups are stored inside their bot."""

    def __init__(self, bots: Optional[List[Bot]] = None):
        self._bots: Dict[str, Bot] = {}
        for bot in bots or []:
            self._bots[bot.id] = bot

    def all(self) -> List[Bot]:
        return list(self._bots.values())

    def first(self) -> Optional[Bot]:
        return next(iter(self._bots.values()), None)

    def get(self, bot_id: str) -> Optional[Bot]:
        return self._bots.get(bot_id)

    def insert(self, bot: Bot) -> Bot:
        if bot.id in self._bots:
            raise ValueError(f"Bot {bot.id} already exists")
        self._commit({**self._bots, bot.id: bot})
        return bot

    def save(self, bot: Bot) -> Bot:
        self._commit({**self._bots, bot.id: bot})
        return bot

    def delete(self, bot_id: str) -> bool:
        if bot_id not in self._bots:
            return False
        bots = dict(self._bots)
        del bots[bot_id]
        self._commit(bots)
        return True

    def create_default(self) -> Bot:
        bot = Bot(
            name=settings.DEFAULT_BOT_NAME,
            api_client=ApiClientConfig(
                server_ip=settings.DEFAULT_SERVER_IP,
                api_key=settings.DEFAULT_API_KEY
            ),
            token="",
            dev_token=""
        )
        return self.insert(bot)

    def _commit(self, bots: Dict[str, Bot]) -> None:
        # The new mapping only replaces the current one once it is written
        self._persist(list(bots.values()))
        self._bots = bots

    def _persist(self, bots: List[Bot]) -> None:
        pass


class BotStore(InMemoryBotStore):
    """Bot store backed by a JSON file."""

    def __init__(self, path: Optional[str] = None):
        self.path = path or settings.STORE_PATH
        super().__init__(self._load())

    def _load(self) -> List[Bot]:
        if not os.path.exists(self.path):
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Could not read bot store {self.path}: {e}")
            raise StoreError(f"Bot store {self.path} is unreadable: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("bots", []), list):
            logger.error(f"Bot store {self.path} has an unexpected layout")
            raise StoreError(
                f"Bot store {self.path} is unreadable: expected {{\"bots\": [...]}}")
        try:
            return [Bot.model_validate(item) for item in data.get("bots", [])]
        except ValidationError as e:
            logger.error(f"Invalid bot in store {self.path}: {e}")
            raise StoreError(
                f"Bot store {self.path} is unreadable: "
                f"{e.error_count()} invalid fields") from e

    def _persist(self, bots: List[Bot]) -> None:
        data = {"bots": [bot.model_dump(mode="json") for bot in bots]}
        tmp_path = None
        try:
            directory = os.path.dirname(os.path.abspath(self.path))
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(f"Could not write bot store {self.path}: {e}")
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StoreError(
                f"Bot store {self.path} is not writable: {e}") from e
