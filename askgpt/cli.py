"""Command-line entry point.

Usage:
    OPENAI_API_KEY=... askgpt
    OPENAI_API_KEY=... python -m askgpt

The process exits with status 1 if the API key is missing, before any prompt
is shown. Otherwise it keeps answering questions until end of input.
"""

import asyncio
import sys
from typing import TextIO

from pydantic import ValidationError

from askgpt.chat.client import ChatCompletionClient
from askgpt.config import Settings, get_settings
from askgpt.console import ChatLoop
from askgpt.exceptions import ConfigurationError
from askgpt.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def load_config() -> tuple[Settings, str]:
    """Load settings and the API key once, at startup.

    Returns:
        Tuple of (settings, api_key).

    Raises:
        ConfigurationError: If the settings are invalid or the key is missing.
    """
    try:
        settings = get_settings()
    except ValidationError as e:
        raise ConfigurationError(
            f"invalid configuration: {e.error_count()} error(s)",
            details={"errors": [err["msg"] for err in e.errors()]},
        ) from e
    return settings, settings.openai.require_api_key()


async def run_chat(
    settings: Settings,
    api_key: str,
    input_stream: TextIO | None = None,
    output_stream: TextIO | None = None,
) -> None:
    """Run the chat loop with a client built from the settings."""
    client = ChatCompletionClient(api_key, settings=settings.openai)
    loop = ChatLoop(
        client,
        input_stream=input_stream,
        output_stream=output_stream,
        spinner=settings.spinner,
    )
    logger.info(f"Starting chat loop with model {client.model_name}")
    try:
        await loop.run()
    finally:
        await client.close()


def main() -> None:
    """Main entry point."""
    try:
        settings, api_key = load_config()
    except ConfigurationError as e:
        print(f"error: {e.message}", file=sys.stderr)
        sys.exit(1)

    setup_logging()

    try:
        asyncio.run(run_chat(settings, api_key))
    except KeyboardInterrupt:
        print(file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    main()
