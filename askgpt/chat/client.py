"""Chat-completion client."""

from typing import Any

import httpx
from pydantic import ValidationError

from askgpt.chat.models import ApiResponse, ChatMessage, RequestBody, Role
from askgpt.config import OpenAISettings, get_settings
from askgpt.exceptions import (
    ConfigurationError,
    DecodingError,
    ErrorCode,
    ProtocolError,
    RequestValidationError,
    TransportError,
)
from askgpt.logging_config import get_logger

logger = get_logger(__name__)


class ChatCompletionClient:
    """Client for the chat-completion endpoint.

    One instance holds the credential for the lifetime of the process.
    Every call issues exactly one POST; nothing is retried or cached.
    """

    def __init__(
        self,
        api_key: str,
        settings: OpenAISettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Bearer token for the API.
            settings: API configuration.
            client: HTTP client (for testing).

        Raises:
            ConfigurationError: If the API key is empty.
        """
        if not api_key:
            raise ConfigurationError("API key must not be empty")
        self._api_key = api_key
        self._settings = settings or get_settings().openai
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._settings.timeout,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def model_name(self) -> str:
        """Get the model name."""
        return self._settings.model

    def build_request_body(self, question: str) -> RequestBody:
        """Build the payload for a single question.

        Args:
            question: The user's text, sent as-is (empty allowed).

        Returns:
            RequestBody with one user message.
        """
        return RequestBody(
            model=self._settings.model,
            messages=[ChatMessage(role=Role.USER, content=question)],
        )

    async def send(self, question: str) -> ApiResponse:
        """Ask a single question.

        Args:
            question: The user's text.

        Returns:
            Parsed and validated API response.

        Raises:
            TransportError: If the request could not be delivered.
            ProtocolError: If the API returned a non-2xx status.
            DecodingError: If the response does not match the schema.
        """
        return await self.complete(self.build_request_body(question).messages)

    async def complete(self, messages: list[ChatMessage]) -> ApiResponse:
        """Run a chat completion over the given messages.

        Only role and content of each message are sent.

        Raises:
            RequestValidationError: If ``messages`` is empty.
        """
        if not messages:
            raise RequestValidationError("at least one message is required")

        client = await self._get_client()
        url = str(self._settings.endpoint)
        body = RequestBody(
            model=self._settings.model,
            messages=[ChatMessage(role=m.role, content=m.content) for m in messages],
        )

        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

        logger.debug(
            "Sending chat completion request",
            extra={"model": body.model, "message_count": len(body.messages)},
        )

        try:
            response = await client.post(
                url,
                content=body.model_dump_json(),
                headers=headers,
            )
            response.raise_for_status()

        except httpx.TimeoutException as e:
            logger.error(f"Chat completion request timed out: {e}")
            raise TransportError(
                "request timed out",
                code=ErrorCode.TIMEOUT,
                details={"timeout": self._settings.timeout},
            ) from e

        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            details: dict[str, Any] = {"status_code": status}
            api_message = _api_error_message(e.response)
            if api_message:
                details["api_message"] = api_message
            logger.error(f"Chat completion request failed: {status}")

            if status in (401, 403):
                code = ErrorCode.AUTHENTICATION_FAILED
            elif status == 429:
                code = ErrorCode.RATE_LIMITED
            else:
                code = ErrorCode.API_ERROR

            message = f"API returned {status}"
            if api_message:
                message = f"{message}: {api_message}"
            raise ProtocolError(message, code=code, details=details) from e

        except httpx.RequestError as e:
            logger.error(f"Chat completion connection error: {e}")
            raise TransportError(
                f"failed to connect to {url}: {e}",
                code=ErrorCode.CONNECTION_ERROR,
                details={"url": url},
            ) from e

        result = self.parse_response(response.content)

        logger.info(
            "Chat completion finished",
            extra={
                "id": result.id,
                "model": result.model,
                "prompt_tokens": result.usage.prompt_tokens,
                "completion_tokens": result.usage.completion_tokens,
                "total_tokens": result.usage.total_tokens,
            },
        )
        return result

    def parse_response(self, payload: bytes | str) -> ApiResponse:
        """Parse and validate a response body.

        Args:
            payload: Raw JSON body.

        Returns:
            The validated response.

        Raises:
            DecodingError: If the body is not JSON, misses or mistypes a
                field, breaks the usage totals, has no choices, or (in strict
                mode) carries unknown fields.
        """
        try:
            result = ApiResponse.model_validate_json(payload)
        except ValidationError as e:
            errors = [
                {
                    "loc": ".".join(str(part) for part in err["loc"]) or "<body>",
                    "msg": err["msg"],
                }
                for err in e.errors()
            ]
            logger.error(f"Invalid chat completion response: {len(errors)} error(s)")
            first = errors[0]
            raise DecodingError(
                f"invalid response from API: {first['loc']}: {first['msg']}",
                details={"errors": errors},
            ) from e

        if self._settings.strict_responses:
            unknown = result.unknown_fields()
            if unknown:
                logger.error(f"Response carries unknown fields: {unknown}")
                raise DecodingError(
                    "response carries unknown fields",
                    details={"fields": unknown},
                )

        return result


def _api_error_message(response: httpx.Response) -> str | None:
    """Pull ``error.message`` out of an API error body, if there is one."""
    try:
        data = response.json()
        message = data["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return None
    return message if isinstance(message, str) else None
