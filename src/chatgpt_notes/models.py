"""Pydantic data models for ChatGPT Notes."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .config import (
    DEFAULT_INCLUDE_TAGS,
    DEFAULT_INCLUDE_TIMESTAMPS,
    DEFAULT_INCLUDE_USER_PROMPTS,
)


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    TOOL = "tool"


class PairState(str, Enum):
    NEW = "new"
    SAVED = "saved"
    IGNORED = "ignored"


class ConversationStatus(str, Enum):
    UNPROCESSED = "unprocessed"
    PARTIAL = "partial"
    PROCESSED = "processed"


# Raw export shapes (conversations.json)


class ExportAuthor(BaseModel):
    """Author block of an exported message."""

    role: Role
    name: str | None = None


class ExportContent(BaseModel):
    """Content block of an exported message."""

    content_type: str = "text"
    parts: list[Any] | None = None

    @property
    def text(self) -> str:
        """String parts joined by newlines; multimodal parts are dropped."""
        if not self.parts:
            return ""
        return "\n".join(p for p in self.parts if isinstance(p, str))


class ExportMessage(BaseModel):
    """A message payload attached to a mapping node."""

    id: str
    author: ExportAuthor
    create_time: float | None = None
    content: ExportContent = Field(default_factory=ExportContent)


class ExportNode(BaseModel):
    """A node of the conversation tree. ``message`` is None for tombstoned nodes."""

    id: str
    message: ExportMessage | None = None
    parent: str | None = None
    children: list[str] = Field(default_factory=list)


class ExportConversation(BaseModel):
    """One conversation from the export, with its message tree."""

    id: str = Field(validation_alias=AliasChoices("id", "conversation_id"))
    title: str | None = None
    create_time: float | None = None
    update_time: float | None = None
    mapping: dict[str, ExportNode] = Field(default_factory=dict)


# Derived shapes


class Message(BaseModel):
    """A thread entry on the primary branch."""

    id: str
    role: Role
    content: str
    timestamp: float = 0


class ConversationThread(BaseModel):
    """The linear transcript of one conversation."""

    conversation_id: str
    title: str
    create_time: float | None = None
    update_time: float | None = None
    messages: list[Message] = Field(default_factory=list)

    @property
    def assistant_count(self) -> int:
        return sum(1 for m in self.messages if m.role == Role.ASSISTANT)


class QAPair(BaseModel):
    """An assistant response and the user prompt right before it, if any."""

    pair_id: str
    conversation_id: str
    prompt: Message | None = None
    response: Message


# Persisted state


class PairRecord(BaseModel):
    """Stored lifecycle state of one pair.

    Records written by older plugin versions (``pairHash``, ``timestamp``,
    ``userPrompt``) are accepted on read and rewritten with current names.
    """

    model_config = ConfigDict(populate_by_name=True)

    pair_id: str = Field(alias="pairId")
    content_hash: str = Field(
        serialization_alias="contentHash",
        validation_alias=AliasChoices("contentHash", "pairHash"),
    )
    conversation_id: str = Field(alias="conversationId")
    state: PairState
    last_modified: int = Field(
        serialization_alias="lastModified",
        validation_alias=AliasChoices("lastModified", "timestamp"),
    )
    prompt_preview: str = Field(
        default="",
        serialization_alias="promptPreview",
        validation_alias=AliasChoices("promptPreview", "userPrompt"),
    )
    response_preview: str = Field(default="", alias="responsePreview")


class PairStore(BaseModel):
    """The whole persisted document: every pair ever touched."""

    model_config = ConfigDict(populate_by_name=True)

    pairs: dict[str, PairRecord] = Field(default_factory=dict, alias="qaPairs")
    last_updated: int = Field(default=0, alias="lastUpdated")


# Workflow shapes


class NoteOptions(BaseModel):
    """Rendering switches for saved notes."""

    include_timestamps: bool = DEFAULT_INCLUDE_TIMESTAMPS
    include_user_prompt: bool = DEFAULT_INCLUDE_USER_PROMPTS
    include_tags: bool = DEFAULT_INCLUDE_TAGS


class ConversationSummary(BaseModel):
    """A row of the conversation listing."""

    conversation_id: str
    title: str
    created: datetime | None = None
    message_count: int = 0
    response_count: int = 0
    status: ConversationStatus = ConversationStatus.UNPROCESSED


class SaveResult(BaseModel):
    """Outcome of saving one pair as a note."""

    path: str
    pair_id: str
    state: PairState
    attempts: int = 1
