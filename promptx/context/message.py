from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from promptx.exceptions.context import ContextValidationError


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    """
    A single immutable chat message.

    Attributes:
        role: "system", "user" or "assistant".
        content: The text content.
    """

    role: Role
    content: str = ""

    def to_dict(self) -> Dict[str, str]:
        """Shape expected by chat-completion endpoints."""
        return {"role": self.role.value, "content": self.content}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Message":
        if not isinstance(data, Mapping):
            raise ContextValidationError(
                f"Message must be an object, got {type(data).__name__}",
                validation_type="message",
                invalid_value=data,
            )
        raw_role = data.get("role")
        try:
            role = Role(raw_role)
        except ValueError as e:
            raise ContextValidationError(
                f"Unknown message role: {raw_role!r}",
                validation_type="role",
                invalid_value=raw_role,
                original_error=e,
            ) from e

        content = data.get("content")
        if content is None:
            content = ""
        elif not isinstance(content, str):
            content = str(content)
        return cls(role=role, content=content)

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(Role.SYSTEM, content)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(Role.USER, content)

    @classmethod
    def assistant(cls, content: str) -> "Message":
        return cls(Role.ASSISTANT, content)


def coerce_messages(items: Iterable[Union[Message, Mapping[str, Any]]]) -> List[Message]:
    """Accept Message objects or {role, content} mappings."""
    return [
        item if isinstance(item, Message) else Message.from_dict(item) for item in items
    ]


@dataclass
class ContextPreparationResult:
    """
    Outcome of one context preparation call.
    Built fresh on every call and consumed by the caller immediately.
    """

    messages: List[Message]
    token_count: int
    was_truncated: bool
    summarized_count: int
    kept_count: int
    summary: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "messages": [m.to_dict() for m in self.messages],
            "tokenCount": self.token_count,
            "wasTruncated": self.was_truncated,
            "summarizedCount": self.summarized_count,
            "keptCount": self.kept_count,
        }
        if self.summary is not None:
            result["summary"] = self.summary
        return result


@dataclass
class ContextStats:
    """Snapshot of context usage for a status indicator."""

    total_tokens: int
    context_limit: int
    usage_percent: float
    message_count: int
    is_near_limit: bool
    is_over_limit: bool
