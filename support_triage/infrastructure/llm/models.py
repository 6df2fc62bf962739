"""Request payloads for the remote inference service."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ChatMessage:
    """One role-tagged turn of a chat-completion request."""

    role: str  # system | user | assistant
    content: str


@dataclass(frozen=True)
class InferenceRequest:
    """Immutable chat-completion request."""

    model: str
    messages: tuple[ChatMessage, ...]
    temperature: float = 0.0
    max_tokens: int = 300

    def __post_init__(self) -> None:
        if not 0.0 <= self.temperature <= 1.0:
            raise ValueError(f"temperature must be within [0, 1], got {self.temperature}")
        if self.max_tokens <= 0:
            raise ValueError(f"max_tokens must be positive, got {self.max_tokens}")

    @classmethod
    def from_prompts(
        cls,
        model: str,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_tokens: int,
    ) -> "InferenceRequest":
        """Build the usual system + user request."""
        return cls(
            model=model,
            messages=(
                ChatMessage(role="system", content=system_prompt),
                ChatMessage(role="user", content=user_prompt),
            ),
            temperature=temperature,
            max_tokens=max_tokens,
        )

    def to_payload(self) -> dict[str, Any]:
        """Keyword arguments for ``chat.completions.create``."""
        return {
            "model": self.model,
            "messages": [{"role": m.role, "content": m.content} for m in self.messages],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
