"""Main application entry point.

Serves the relay API and the NiceGUI chat page from one uvicorn process.
Environment variables are loaded from .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Build the app, mount the chat page on it and serve both.

    Reads HOST, PORT and LOG_LEVEL. Fails fast when no API key is configured.
    """
    import uvicorn
    from nicegui import ui

    from chat_relay.api.app import create_app
    from chat_relay.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    app = create_app()
    ui.run_with(app, title="Chat Relay")

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Chat UI on http://{host}:{port}/, relay at POST /api/chat")

    uvicorn.run(app, host=host, port=port, log_level=os.getenv("LOG_LEVEL", "info").lower())


if __name__ == "__main__":
    main()
