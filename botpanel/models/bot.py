# botpanel/models/bot.py
import uuid
from typing import List, Optional
from pydantic import BaseModel, Field


class ApiClientConfig(BaseModel):
    server_ip: str
    api_key: str


class GroupModel(BaseModel):
    name: str
    is_valid: bool = False
    attendance_active: bool = False


class Bot(BaseModel):
    """Configuration of one Discord bot connection."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    name: str
    api_client: ApiClientConfig
    is_active: bool = False
    role: str = ""
    token: str = ""
    dev_token: str = ""
    is_developer_mode: bool = False
    groups: List[GroupModel] = Field(default_factory=list)

    @property
    def active_token(self) -> str:
        """Token the bot is started with in its current mode."""
        return self.dev_token if self.is_developer_mode else self.token

    def get_group(self, name: str) -> Optional[GroupModel]:
        key = name.strip().lower()
        return next(
            (group for group in self.groups if group.name.lower() == key),
            None
        )

    def add_group(self, name: str) -> GroupModel:
        name = name.strip()
        if not name:
            raise ValueError("Group name must not be empty")
        if self.get_group(name) is not None:
            raise ValueError(f"Group '{name}' already exists")
        group = GroupModel(name=name)
        self.groups.append(group)
        return group

    def remove_group(self, name: str) -> bool:
        group = self.get_group(name)
        if group is None:
            return False
        self.groups.remove(group)
        return True

    @property
    def attendance_group(self) -> Optional[GroupModel]:
        return next(
            (group for group in self.groups if group.attendance_active),
            None
        )
