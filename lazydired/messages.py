"""User-visible message channel.

Problems are reported here instead of raised so the listing keeps working;
the runtime paints the latest message on the status row.
"""

from __future__ import annotations

from dataclasses import dataclass, field

INFO = "info"
WARNING = "warning"
ERROR = "error"


@dataclass(frozen=True)
class Message:
    level: str
    text: str


@dataclass
class MessageChannel:
    """Append-only list of messages with a bounded history."""

    max_messages: int = 200
    messages: list[Message] = field(default_factory=list)

    def post(self, level: str, text: str) -> None:
        self.messages.append(Message(level, text))
        if len(self.messages) > self.max_messages:
            del self.messages[: len(self.messages) - self.max_messages]

    def info(self, text: str) -> None:
        self.post(INFO, text)

    def warning(self, text: str) -> None:
        self.post(WARNING, text)

    def error(self, text: str) -> None:
        self.post(ERROR, text)

    def latest(self) -> Message | None:
        return self.messages[-1] if self.messages else None

    def clear(self) -> None:
        self.messages.clear()
