"""FastAPI endpoints for the chat relay.

Endpoints:
    - GET /health: Service health status
    - POST /api/chat: Relay a message, stream the reply as plain text
    - GET /api/sessions/{id}: Stored session history
"""

from chat_relay.api.app import build_relay, create_app

__all__ = ["build_relay", "create_app"]
