# botpanel/models/dto.py
"""Decoding targets for the JSON the bot server sends back.

Fields mirror the server payloads; anything the server adds beyond them is
ignored.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class DTO(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)


class BotStatus(DTO):
    running: bool
    developer_mode: bool = False
    bot_name: Optional[str] = None


class ActionResult(DTO):
    success: bool
    message: str = ""


class Member(DTO):
    id: str
    name: str
    display_name: Optional[str] = None
    roles: List[str] = Field(default_factory=list)

    @property
    def label(self) -> str:
        return self.display_name or self.name


class Role(DTO):
    id: str
    name: str
    color: Optional[int] = None
    position: Optional[int] = None


class Channel(DTO):
    id: str
    name: str
    type: str = "text"
    category: Optional[str] = None


class AttendanceEntry(DTO):
    member: str
    present: bool
    timestamp: Optional[datetime] = None


class AttendanceFile(DTO):
    filename: str
    group: str = ""
    created_at: Optional[datetime] = None
    entries: List[AttendanceEntry] = Field(default_factory=list)

    @property
    def present_count(self) -> int:
        return sum(1 for entry in self.entries if entry.present)


class SurveyResult(DTO):
    option: str
    votes: int = 0


class SurveyFile(DTO):
    filename: str
    title: str = ""
    created_at: Optional[datetime] = None
    results: List[SurveyResult] = Field(default_factory=list)

    @property
    def total_votes(self) -> int:
        return sum(result.votes for result in self.results)


class ClearResult(DTO):
    channel_id: str
    deleted: int


class RoleAssignment(DTO):
    role: str
    assigned: List[str] = Field(default_factory=list)
    failed: List[str] = Field(default_factory=list)


class GroupValidation(DTO):
    name: str
    valid: bool
