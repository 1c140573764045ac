from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictStr


class ChatRole(str, Enum):
    """Speaker of a conversation turn."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class ChatTurn(BaseModel):
    """A single turn in a conversation.

    Attributes:
        role: The speaker (system, user, assistant or tool).
        content: The turn text. May be empty.
    """

    model_config = ConfigDict(frozen=True)

    role: ChatRole
    content: str = ""


class ChatRequest(BaseModel):
    """Request payload for the chat relay endpoint.

    Attributes:
        message: User's message. Must be a non-empty string.
        session_id: Optional session for conversation continuity.
            Accepted as ``sessionId`` or ``session_id``.
    """

    message: StrictStr = Field(..., min_length=1)
    session_id: StrictStr | None = Field(
        None,
        validation_alias=AliasChoices("sessionId", "session_id"),
    )


class SessionInfo(BaseModel):
    """Stored history of a chat session.

    Attributes:
        session_id: Session identifier.
        message_count: Number of turns currently retained.
        messages: Retained turns, oldest first.
    """

    session_id: str
    message_count: int = Field(ge=0)
    messages: list[ChatTurn] = Field(default_factory=list)
