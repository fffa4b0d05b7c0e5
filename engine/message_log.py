from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from settings import WHITE

# Type alias for RGB colors used in UI rendering
Color = Tuple[int, int, int]


class MessageLog:
    """
    Append-only game message history.

    Every entry is a (text, color) pair. The log is never truncated by the
    game itself; the HUD asks for a window of recent entries instead.
    """

    def __init__(self) -> None:
        self.messages: List[Tuple[str, Color]] = []

    # ------------------------------------------------------------------
    # Core API
    # ------------------------------------------------------------------

    def add(self, value: str, color: Optional[Color] = None) -> None:
        """
        Add a message with an optional color.

        Multi-line strings become one entry per non-empty line, all sharing
        the same color.
        """
        raw = "" if value is None else str(value)
        raw = raw.replace("\r\n", "\n").replace("\r", "\n")
        lines = [ln.strip() for ln in raw.split("\n") if ln.strip()]

        color = color if color is not None else WHITE
        for line in lines:
            self.messages.append((line, tuple(color)))

    def recent(self, count: int) -> List[Tuple[str, Color]]:
        """The last `count` entries, oldest first."""
        if count <= 0:
            return []
        return self.messages[-count:]

    @property
    def last_message(self) -> str:
        if not self.messages:
            return ""
        return self.messages[-1][0]

    def __len__(self) -> int:
        return len(self.messages)

    def __iter__(self) -> Iterator[Tuple[str, Color]]:
        return iter(self.messages)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MessageLog):
            return NotImplemented
        return self.messages == other.messages
