"""Unit tests for conversation and request schemas."""

import pytest
from pydantic import ValidationError

from chat_relay.models.schemas import ChatRequest, ChatRole, ChatTurn


class TestChatTurn:
    def test_role_is_closed_enum(self) -> None:
        with pytest.raises(ValidationError):
            ChatTurn(role="narrator", content="Once upon a time")

    def test_accepts_every_role(self) -> None:
        roles = [ChatTurn(role=r, content="").role for r in ("system", "user", "assistant", "tool")]

        assert roles == [ChatRole.SYSTEM, ChatRole.USER, ChatRole.ASSISTANT, ChatRole.TOOL]

    def test_turn_is_immutable(self) -> None:
        turn = ChatTurn(role=ChatRole.USER, content="hi")

        with pytest.raises(ValidationError):
            turn.content = "changed"


class TestChatRequest:
    def test_accepts_camel_case_session_id(self) -> None:
        request = ChatRequest.model_validate({"message": "hi", "sessionId": "abc"})

        assert request.session_id == "abc"

    def test_accepts_snake_case_session_id(self) -> None:
        request = ChatRequest.model_validate({"message": "hi", "session_id": "abc"})

        assert request.session_id == "abc"

    def test_session_id_is_optional(self) -> None:
        assert ChatRequest.model_validate({"message": "hi"}).session_id is None

    def test_whitespace_message_is_kept_verbatim(self) -> None:
        assert ChatRequest.model_validate({"message": "  hi \n"}).message == "  hi \n"

    @pytest.mark.parametrize("payload", [{}, {"message": ""}, {"message": 42}, {"message": None}])
    def test_rejects_invalid_message(self, payload: dict) -> None:
        with pytest.raises(ValidationError) as exc_info:
            ChatRequest.model_validate(payload)

        assert exc_info.value.errors()[0]["loc"] == ("message",)

    def test_rejects_non_string_session_id(self) -> None:
        with pytest.raises(ValidationError):
            ChatRequest.model_validate({"message": "hi", "sessionId": 7})
