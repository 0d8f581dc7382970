"""Domain records handed to the graph builder by the data store."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class User:
    """A person who gives or receives gifts. Identity key is ``id``."""

    id: str
    name: str
    avatar: str
    color: str


@dataclass(frozen=True)
class Comment:
    id: str
    user_name: str
    text: str
    timestamp: int  # epoch ms


@dataclass(frozen=True)
class Gift:
    """A directed, timestamped transfer from ``sender_id`` to ``receiver_id``."""

    id: str
    sender_id: str
    receiver_id: str
    item: str
    timestamp: int  # epoch ms
    tips: int = 0
    comments: tuple[Comment, ...] = field(default_factory=tuple)
