"""Session-scoped chat relay.

Turns one inbound user message into a streamed assistant reply while keeping
each session's history bounded.

Lifecycle of one call to ``ChatRelay.send_message``:

1. **Validate** - the message must be a non-empty string.
2. **Check out the session** - one relay in flight per session; later callers
   wait for the lock.
3. **Assemble** - ``[system] + history + [user]``.
4. **Persist the user turn, then dispatch** - the provider is started and its
   first fragment pulled before returning, so dispatch failures surface as
   ProviderError instead of a half-sent response.
5. **Stream** - ``RelayStream`` pulls one provider fragment per fragment
   consumed, so nothing is buffered ahead of the caller.
6. **Commit** - on provider completion the joined text is stored as the
   assistant turn and the session is cut to the most recent ``max_turns``.

A provider failure restores the session to its pre-call history. A stream
closed early by the caller keeps the user turn but stores no assistant turn.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Sequence

from chat_relay.models.schemas import ChatRole, ChatTurn
from chat_relay.relay.config import RelayConfig
from chat_relay.relay.exceptions import InvalidMessageError, ProviderError
from chat_relay.relay.provider import ChatProvider
from chat_relay.store.session_store import Session, SessionStore

logger = logging.getLogger(__name__)


async def _close_quietly(fragments: AsyncIterator[str]) -> None:
    """Close a provider stream, best-effort."""
    close = getattr(fragments, "aclose", None)
    if close is None:
        return
    try:
        await close()
    except Exception:
        logger.debug("Provider stream did not close cleanly", exc_info=True)


class RelayStream:
    """Fragments of one relay invocation.

    Finite and non-restartable. The session stays checked out until the
    stream completes, fails or is closed.
    """

    def __init__(
        self,
        store: SessionStore,
        session: Session,
        fragments: AsyncIterator[str],
        history: list[ChatTurn],
        max_turns: int,
    ) -> None:
        self._store = store
        self._session = session
        self._fragments = fragments
        self._history = history
        self._max_turns = max_turns
        self._parts: list[str] = []
        self._pending: str | None = None
        self._exhausted = False
        self._closed = False

    @property
    def session_id(self) -> str:
        return self._session.session_id

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def text(self) -> str:
        """Text delivered so far."""
        return "".join(self._parts)

    async def prime(self) -> None:
        """Pull the first fragment so dispatch errors raise here."""
        try:
            self._pending = await anext(self._fragments)
        except StopAsyncIteration:
            self._exhausted = True

    def __aiter__(self) -> "RelayStream":
        return self

    async def __anext__(self) -> str:
        if self._closed:
            raise StopAsyncIteration

        if self._pending is not None:
            fragment, self._pending = self._pending, None
        elif self._exhausted:
            self._complete()
            raise StopAsyncIteration
        else:
            try:
                fragment = await anext(self._fragments)
            except StopAsyncIteration:
                self._complete()
                raise
            except asyncio.CancelledError:
                await self.aclose()
                raise
            except ProviderError:
                self._fail()
                raise
            except Exception as e:
                self._fail()
                raise ProviderError(str(e)) from e

        self._parts.append(fragment)
        return fragment

    async def aclose(self) -> None:
        """Stop early. Partial text is not stored as an assistant turn."""
        if self._closed:
            return
        self._finish()
        logger.info(
            f"Stream for session {self.session_id} closed after "
            f"{len(self.text)} chars; reply discarded"
        )
        await _close_quietly(self._fragments)

    def _complete(self) -> None:
        sid = self.session_id
        self._store.append(sid, ChatTurn(role=ChatRole.ASSISTANT, content=self.text))
        retained = self._store.get(sid)[-self._max_turns :]
        self._store.replace(sid, retained)
        self._finish()
        logger.info(
            f"Stored reply for session {sid} ({len(self.text)} chars, "
            f"{len(retained)} turns retained)"
        )

    def _fail(self) -> None:
        self._store.replace(self.session_id, self._history)
        self._finish()
        logger.warning(f"Provider failed mid-stream for session {self.session_id}")

    def _finish(self) -> None:
        self._closed = True
        self._store.release(self._session)


class ChatRelay:
    """Relays user messages to the model provider with per-session history."""

    def __init__(
        self,
        store: SessionStore,
        provider: ChatProvider,
        config: RelayConfig,
    ) -> None:
        """Initialize the relay.

        Args:
            store: Session store shared by every request.
            provider: Streaming model provider.
            config: Relay configuration.
        """
        self._store = store
        self._provider = provider
        self._config = config

    @property
    def store(self) -> SessionStore:
        return self._store

    @property
    def config(self) -> RelayConfig:
        return self._config

    def build_prompt(self, history: Sequence[ChatTurn], message: str) -> list[ChatTurn]:
        """Assemble the provider prompt.

        Args:
            history: Stored turns, oldest first.
            message: The new user message.

        Returns:
            System instruction, then history, then the new user turn.
        """
        return [
            ChatTurn(role=ChatRole.SYSTEM, content=self._config.system_prompt),
            *history,
            ChatTurn(role=ChatRole.USER, content=message),
        ]

    async def send_message(
        self,
        message: object,
        session_id: str | None = None,
    ) -> RelayStream:
        """Relay a message and return the streamed reply.

        Args:
            message: The user's message.
            session_id: Session identifier. Callers that send none share
                the configured default session.

        Returns:
            RelayStream over the reply fragments.

        Raises:
            InvalidMessageError: If message is not a non-empty string.
            ProviderError: If the provider fails before the first fragment.
        """
        if not isinstance(message, str) or not message:
            raise InvalidMessageError("Invalid message")

        sid = self._config.default_session_id if session_id is None else session_id
        session = await self._store.checkout(sid)
        history = self._store.get(sid)

        fragments: AsyncIterator[str] | None = None
        try:
            self._store.append(sid, ChatTurn(role=ChatRole.USER, content=message))
            prompt = self.build_prompt(history, message)
            logger.info(f"Dispatching {len(prompt)} turn(s) for session {sid}")
            fragments = aiter(self._provider.stream(prompt))

            stream = RelayStream(
                self._store,
                session,
                fragments,
                history,
                self._config.max_turns,
            )
            await stream.prime()
        except ProviderError:
            await self._abort(session, history, fragments)
            raise
        except Exception as e:
            await self._abort(session, history, fragments)
            raise ProviderError(str(e)) from e
        except BaseException:
            await self._abort(session, history, fragments)
            raise

        return stream

    async def _abort(
        self,
        session: Session,
        history: list[ChatTurn],
        fragments: AsyncIterator[str] | None,
    ) -> None:
        self._store.replace(session.session_id, history)
        self._store.release(session)
        logger.warning(f"Relay for session {session.session_id} aborted before streaming")
        if fragments is not None:
            await _close_quietly(fragments)
