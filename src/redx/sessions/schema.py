from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from common.ids import generate_id
from redx.config import ChatMode


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class Role(str, Enum):
    USER = "user"
    MODEL = "model"


class Message(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=generate_id)
    role: Role
    content: str = ""
    timestamp: str = Field(default_factory=now_iso)
    mode: ChatMode = ChatMode.FAST


class ChatSession(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=generate_id)
    title: str = ""
    messages: list[Message] = Field(default_factory=list)
    created_at: str = Field(default_factory=now_iso, alias="createdAt")
    last_modified: str = Field(default_factory=now_iso, alias="lastModified")

    def index_of(self, message_id: str) -> int:
        for index, message in enumerate(self.messages):
            if message.id == message_id:
                return index
        return -1
