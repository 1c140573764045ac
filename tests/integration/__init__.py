"""Integration tests for components working together as a system.

Coverage:
    - API endpoints with real HTTP requests through ASGITransport
    - Relay and session store behind the endpoint
    - Provider responses with live LLM calls (when configured)

The model provider is scripted unless an API key is set.
"""
