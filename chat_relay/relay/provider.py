"""Model provider adapters.

The relay talks to any object with a ``stream(messages)`` method returning an
async iterator of text fragments. ``AgnoProvider`` is the production adapter:
it forwards the assembled conversation to an Agno agent backed by an
OpenAI-compatible chat model and yields content deltas as they arrive.

The agent is stateless here. History, truncation and the system instruction
are owned by the relay, so the agent gets no storage and no instructions of
its own.
"""

import logging
from collections.abc import AsyncIterator, Sequence
from typing import Protocol

from agno.agent import Agent
from agno.models.message import Message
from agno.models.openai import OpenAIChat
from agno.run.agent import RunEvent

from chat_relay.models.schemas import ChatTurn
from chat_relay.relay.config import RelayConfig
from chat_relay.relay.exceptions import ProviderError

logger = logging.getLogger(__name__)


class ChatProvider(Protocol):
    """Anything that can stream a completion for an ordered conversation."""

    def stream(self, messages: Sequence[ChatTurn]) -> AsyncIterator[str]: ...


class AgnoProvider:
    """Streams completions through an Agno agent.

    Every failure from the model or the network is raised as ProviderError.
    """

    def __init__(self, config: RelayConfig) -> None:
        """Initialize the provider.

        Args:
            config: Relay configuration holding model and credentials.
        """
        self._config = config
        self._agent = self._create_agent()

    def _create_agent(self) -> Agent:
        """Create the Agno agent instance.

        Returns:
            Agent with an OpenAI-compatible model and no storage.
        """
        model = OpenAIChat(
            id=self._config.model_name,
            api_key=self._config.api_key,
            base_url=self._config.base_url,
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
        )

        return Agent(
            model=model,
            add_history_to_context=False,
            markdown=False,
        )

    async def stream(self, messages: Sequence[ChatTurn]) -> AsyncIterator[str]:
        """Stream response fragments for a conversation.

        Args:
            messages: Full prompt, system instruction first.

        Yields:
            Response text fragments in provider order.

        Raises:
            ProviderError: If the model run fails.
        """
        run_input = [Message(role=turn.role.value, content=turn.content) for turn in messages]
        logger.debug(f"Streaming {len(run_input)} message(s) to {self._config.model_name}")

        try:
            async for chunk in self._agent.arun(run_input, stream=True):
                event = getattr(chunk, "event", None)
                if event == RunEvent.run_error:
                    raise ProviderError(str(chunk.content or "Model run failed"))
                if event == RunEvent.run_content and chunk.content:
                    yield chunk.content
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(str(e)) from e
