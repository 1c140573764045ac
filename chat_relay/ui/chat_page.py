"""NiceGUI chat interface consuming the plain-text reply stream."""

import html
import os
import uuid
from collections.abc import Callable
from datetime import datetime

import httpx
from nicegui import ui

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")

WELCOME_MESSAGE = (
    "Hi! I'm your assistant. Ask a question or describe a task. "
    "Use Shift+Enter for a new line."
)
ERROR_MESSAGE = "Erro ao gerar resposta."
# Plain Enter sends; Shift+Enter falls through and inserts a newline
SEND_KEY_EVENT = "keydown.enter.exact.prevent"

CUSTOM_CSS = """
<style>
    body { background: #f5f5f5; min-height: 100vh; }
    .app-container { background: white; border-radius: 12px; overflow: hidden; }
    .message-user { background: #4f46e5; color: white; border-radius: 18px 18px 4px 18px; }
    .message-assistant { background: #f3f4f6; color: #1f2937; border-radius: 18px 18px 18px 4px; }
    .message-body { white-space: pre-wrap; }
</style>
"""


def to_html(text: str) -> str:
    """Escape message text for display, keeping line breaks."""
    return html.escape(text).replace("\n", "<br>")


class ChatSession:
    """Chat state for one page load.

    The session id is random and drawn once per page, so a reload starts a
    new conversation on the server.
    """

    def __init__(self) -> None:
        self.messages: list[dict] = []
        self.session_id: str = str(uuid.uuid4())
        self.is_streaming: bool = False
        self.reset()

    def reset(self) -> None:
        self.messages.clear()
        self.add_message("assistant", WELCOME_MESSAGE)

    def add_message(self, role: str, content: str) -> dict:
        message = {
            "role": role,
            "content": content,
            "time": datetime.now().strftime("%I:%M %p"),
        }
        self.messages.append(message)
        return message


async def stream_chat_response(
    message: str,
    session_id: str,
    on_chunk: Callable[[str], None],
    on_complete: Callable[[], None],
    on_error: Callable[[str], None],
    client: httpx.AsyncClient | None = None,
) -> None:
    """POST a message to /api/chat and feed decoded text fragments to on_chunk."""
    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(base_url=API_BASE_URL, timeout=120.0)

    try:
        async with client.stream(
            "POST",
            "/api/chat",
            json={"message": message, "sessionId": session_id},
        ) as response:
            response.raise_for_status()
            async for text in response.aiter_text():
                if text:
                    on_chunk(text)
        on_complete()
    except httpx.HTTPStatusError as e:
        on_error(f"HTTP {e.response.status_code}")
    except httpx.RequestError as e:
        on_error(f"Connection failed: {e}")
    finally:
        if owns_client:
            await client.aclose()


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)
    session = ChatSession()

    messages_container: ui.column
    input_field: ui.textarea
    send_btn: ui.button

    def render_message(msg: dict) -> ui.html:
        is_user = msg["role"] == "user"
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"

        with ui.row().classes(f"w-full {align}"), ui.column().classes("max-w-[70%] gap-1"):
            with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                body = ui.html(to_html(msg["content"]), sanitize=False).classes(
                    "message-body text-sm leading-relaxed"
                )
            ui.label(msg["time"]).classes("text-[10px] text-gray-400")
        return body

    def refresh_messages() -> None:
        messages_container.clear()
        with messages_container:
            for msg in session.messages:
                render_message(msg)

    async def send_message() -> None:
        text = input_field.value.strip()
        if not text or session.is_streaming:
            return

        input_field.value = ""
        session.is_streaming = True
        send_btn.disable()

        session.add_message("user", text)
        refresh_messages()

        placeholder: dict | None = None
        placeholder_body: ui.html | None = None

        def on_chunk(content: str) -> None:
            nonlocal placeholder, placeholder_body
            if placeholder is None:
                placeholder = session.add_message("assistant", "")
                with messages_container:
                    placeholder_body = render_message(placeholder)
            placeholder["content"] += content
            placeholder_body.set_content(to_html(placeholder["content"]))

        def on_complete() -> None:
            if placeholder is None:
                session.add_message("assistant", "")
            finish()

        def on_error(error: str) -> None:
            session.add_message("assistant", ERROR_MESSAGE)
            finish()
            ui.notify(error, type="negative")

        def finish() -> None:
            session.is_streaming = False
            send_btn.enable()
            refresh_messages()

        await stream_chat_response(text, session.session_id, on_chunk, on_complete, on_error)

    def new_chat() -> None:
        session.reset()
        session.session_id = str(uuid.uuid4())
        refresh_messages()

    with (
        ui.element("div").classes("w-full min-h-screen p-4 md:p-8"),
        ui.column().classes("w-full max-w-3xl mx-auto app-container").style(
            "height: calc(100vh - 4rem)"
        ),
    ):
        with ui.row().classes("w-full bg-indigo-600 px-5 py-4 items-center justify-between"):
            ui.label("Assistant").classes("text-lg font-semibold text-white")
            ui.button(icon="add", on_click=new_chat).props("flat round color=white")

        with (
            ui.scroll_area().classes("flex-grow w-full bg-gray-50"),
            ui.column().classes("w-full p-5"),
        ):
            messages_container = ui.column().classes("w-full gap-4")
            refresh_messages()

        with ui.row().classes("w-full p-4 gap-3 items-end bg-white border-t"):
            input_field = (
                ui.textarea(placeholder="Type a message...")
                .props("autogrow outlined dense rows=1")
                .classes("flex-grow")
                .on(SEND_KEY_EVENT, send_message)
            )
            send_btn = ui.button(icon="send", on_click=send_message).props("round unelevated")
