"""Unit tests for individual components in isolation.

Ensures fast execution with minimal dependencies.

Coverage:
    - models/: Pydantic validation
    - store/: Session storage, eviction and checkout
    - relay/: Prompt assembly, streaming, commit, failure paths
    - ui/: Stream consumer of the chat page

Uses scripted providers and mocks for external services.
"""
