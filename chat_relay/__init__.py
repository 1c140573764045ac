"""Chat Relay - session-scoped streaming relay to a hosted language model.

Combines FastAPI for HTTP streaming, Agno for model access,
NiceGUI for the chat page, and Pydantic for data validation.

Components:
    - api: HTTP endpoints and streaming responses
    - relay: Prompt assembly, provider dispatch and history commit
    - store: In-memory per-session conversation history
    - ui: Web interface for chat interactions
    - models: Conversation and request schemas
"""

__version__ = "0.1.0"
