"""Process-lifetime storage of conversation history, keyed by session id."""

from chat_relay.store.session_store import Session, SessionStore

__all__ = ["Session", "SessionStore"]
