"""Interactive question/answer loop."""

import asyncio
import contextlib
import sys
import threading
from collections.abc import AsyncIterator
from typing import TextIO

from askgpt.chat.client import ChatCompletionClient
from askgpt.chat.models import ApiResponse
from askgpt.exceptions import AskGPTError
from askgpt.logging_config import get_logger

logger = get_logger(__name__)

GREETING = "enter your question, and type ENTER"
PROMPT = "> "
SPINNER_FRAMES = "-\\|/"
SPINNER_DELAY = 0.1


class ChatLoop:
    """Reads questions line by line and prints the replies.

    Only one request is ever in flight: the next line is not read until the
    current call has finished, successfully or not. A failed call is reported
    and the loop carries on.
    """

    def __init__(
        self,
        client: ChatCompletionClient,
        input_stream: TextIO | None = None,
        output_stream: TextIO | None = None,
        spinner: bool = True,
    ) -> None:
        """Initialize the loop.

        Args:
            client: Chat-completion client that answers questions.
            input_stream: Where questions are read from (default stdin).
            output_stream: Where prompts and replies go (default stdout).
            spinner: Animate while waiting; only honoured on a terminal.
        """
        self._client = client
        self._input = input_stream or sys.stdin
        self._output = output_stream or sys.stdout
        self._spinner = spinner and self._output.isatty()

    async def run(self) -> None:
        """Run until the input is exhausted."""
        self._write(f"{GREETING}\n")

        while True:
            self._write(PROMPT)
            question = await self.read_question()
            if question is None:
                logger.debug("End of input, leaving chat loop")
                return
            await self.ask(question)

    async def read_question(self) -> str | None:
        """Read one line, without its line terminator.

        Returns:
            The line, or None at end of input.
        """
        line = await self._readline()
        if not line:
            return None
        if line.endswith("\n"):
            line = line[:-1]
            if line.endswith("\r"):
                line = line[:-1]
        return line

    async def _readline(self) -> str:
        """Read a line on a daemon thread; loop shutdown never waits on it."""
        loop = asyncio.get_running_loop()
        future: asyncio.Future[str] = loop.create_future()

        def _resolve(line: str | None, error: BaseException | None) -> None:
            if future.done():
                return
            if error is not None:
                future.set_exception(error)
            else:
                future.set_result(line or "")

        def _read() -> None:
            try:
                line = self._input.readline()
            except Exception as e:
                result: tuple[str | None, BaseException | None] = (None, e)
            else:
                result = (line, None)
            # Loop already closed after Ctrl-C.
            with contextlib.suppress(RuntimeError):
                loop.call_soon_threadsafe(_resolve, *result)

        threading.Thread(target=_read, name="askgpt-stdin", daemon=True).start()
        return await future

    async def ask(self, question: str) -> ApiResponse | None:
        """Send one question and print the outcome.

        Returns:
            The response, or None if the call failed.
        """
        try:
            async with self._waiting():
                response = await self._client.send(question)
        except AskGPTError as e:
            self._write(f"error [{e.code.value}]: {e.message}\n\n")
            return None

        self._write(f"{response.reply.content}\n\n")
        return response

    @contextlib.asynccontextmanager
    async def _waiting(self) -> AsyncIterator[None]:
        """Show the spinner for as long as the block runs."""
        if not self._spinner:
            yield
            return

        task = asyncio.create_task(self._spin())
        try:
            yield
        finally:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
            self._write("\r \r")

    async def _spin(self) -> None:
        while True:
            for frame in SPINNER_FRAMES:
                self._write(f"\r{frame}")
                await asyncio.sleep(SPINNER_DELAY)

    def _write(self, text: str) -> None:
        self._output.write(text)
        self._output.flush()
