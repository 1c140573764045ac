"""Chat relay: bridges one inbound message to a streamed model reply.

Responsibilities:
    - Prompt assembly from the system instruction and session history
    - Dispatch to the model provider (Agno over OpenAI-compatible APIs)
    - Incremental streaming of reply fragments
    - Committing and truncating session history on completion

Maintains clean separation from the HTTP layer.
"""

from chat_relay.relay.config import RelayConfig, get_relay_config
from chat_relay.relay.exceptions import InvalidMessageError, ProviderError, RelayError
from chat_relay.relay.provider import AgnoProvider, ChatProvider
from chat_relay.relay.service import ChatRelay, RelayStream

__all__ = [
    "AgnoProvider",
    "ChatProvider",
    "ChatRelay",
    "InvalidMessageError",
    "ProviderError",
    "RelayConfig",
    "RelayError",
    "RelayStream",
    "get_relay_config",
]
