"""NiceGUI interface - thin rendering client for the chat relay.

Responsibilities:
    - Optimistic display of the user's turn
    - Incremental rendering of the streamed assistant reply
    - Per-page session id generation

Contains no business logic. Delegates all operations to the API.
"""
