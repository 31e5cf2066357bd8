"""Chat-completion wire models.

The same models describe the outbound request body and the parsed response.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, model_validator


class Role(str, Enum):
    """Message role in a conversation."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """One role-tagged utterance exchanged with the API.

    Attributes:
        role: The role of the message sender.
        content: The message content.
    """

    model_config = ConfigDict(extra="forbid")

    role: Role = Field(description="Message role")
    content: StrictStr = Field(description="Message content")


class ResponseMessage(ChatMessage):
    """A message as returned by the API; unknown fields are kept."""

    model_config = ConfigDict(extra="allow")


class RequestBody(BaseModel):
    """Outbound chat-completion payload."""

    model_config = ConfigDict(extra="forbid")

    model: StrictStr = Field(description="Model identifier")
    messages: list[ChatMessage] = Field(min_length=1, description="Ordered messages")


class Usage(BaseModel):
    """Token accounting for a single call.

    Attributes:
        prompt_tokens: Tokens in the request messages.
        completion_tokens: Tokens in the generated reply.
        total_tokens: Sum of the two; checked on parse.
    """

    model_config = ConfigDict(extra="allow")

    prompt_tokens: StrictInt = Field(ge=0, description="Prompt token count")
    completion_tokens: StrictInt = Field(ge=0, description="Completion token count")
    total_tokens: StrictInt = Field(ge=0, description="Total token count")

    @model_validator(mode="after")
    def _check_total(self) -> "Usage":
        expected = self.prompt_tokens + self.completion_tokens
        if self.total_tokens != expected:
            raise ValueError(
                f"total_tokens is {self.total_tokens}, expected {expected} "
                "(prompt_tokens + completion_tokens)"
            )
        return self


class Choice(BaseModel):
    """One candidate completion."""

    model_config = ConfigDict(extra="allow")

    message: ResponseMessage = Field(description="Generated message")
    finish_reason: StrictStr = Field(description="Why generation stopped")
    index: StrictInt = Field(ge=0, description="Position among the choices")


class ApiResponse(BaseModel):
    """Full parsed chat-completion response.

    Attributes:
        id: Completion identifier assigned by the API.
        object: Object type, normally ``chat.completion``.
        model: Model that produced the completion.
        usage: Token accounting.
        choices: Candidate completions, at least one.
    """

    model_config = ConfigDict(extra="allow")

    id: StrictStr = Field(description="Completion ID")
    object: StrictStr = Field(description="Object type")
    model: StrictStr = Field(description="Model used")
    usage: Usage = Field(description="Token usage")
    choices: list[Choice] = Field(min_length=1, description="Candidate completions")

    @property
    def reply(self) -> ResponseMessage:
        """The message of the first choice."""
        return self.choices[0].message

    def unknown_fields(self) -> list[str]:
        """Return dotted paths of fields outside the known schema."""
        return _collect_extras(self, "")


def _collect_extras(model: BaseModel, prefix: str) -> list[str]:
    paths = [f"{prefix}{key}" for key in (model.model_extra or {})]
    for name in type(model).model_fields:
        value = getattr(model, name)
        if isinstance(value, BaseModel):
            paths.extend(_collect_extras(value, f"{prefix}{name}."))
        elif isinstance(value, list):
            for i, item in enumerate(value):
                if isinstance(item, BaseModel):
                    paths.extend(_collect_extras(item, f"{prefix}{name}[{i}]."))
    return paths
