from dataclasses import dataclass
from typing import Any, Literal, Protocol, Sequence


Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str


@dataclass(frozen=True)
class JsonSchemaFormat:
    name: str
    schema: dict[str, Any]


class LLMError(RuntimeError):
    def __init__(self, message: str, *, code: str = "llm_exception"):
        super().__init__(message)
        self.code = code


class LLMClient(Protocol):
    """One round-trip per call; implementations never retry."""

    model: str

    async def complete(
        self,
        messages: Sequence[ChatMessage],
        *,
        stage: str,
        json_mode: bool = False,
        json_schema: JsonSchemaFormat | None = None,
        max_output_tokens: int | None = None,
    ) -> str: ...
