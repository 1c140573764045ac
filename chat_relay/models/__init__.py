"""Pydantic models for conversation state and API payloads.

Models:
    - ChatRole: Closed set of turn roles
    - ChatTurn: Individual turn in a conversation
    - ChatRequest: Incoming relay request payload
    - SessionInfo: Stored session history
"""

from chat_relay.models.schemas import ChatRequest, ChatRole, ChatTurn, SessionInfo

__all__ = ["ChatRequest", "ChatRole", "ChatTurn", "SessionInfo"]
