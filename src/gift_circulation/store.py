"""In-memory data store for users, gifts and comments.

Implements the store contract the graph view consumes: listing, name-based
get-or-create of users, and gift/comment/tip writes. Self gifts and blank
input are rejected here, before anything reaches the graph builder.
"""

from __future__ import annotations

import logging
import random
import string
import time
from dataclasses import replace
from urllib.parse import quote

from gift_circulation.models import Comment, Gift, User

logger = logging.getLogger(__name__)


# ─── Errors ───────────────────────────────────────────────────────────────────


class GiftStoreError(Exception):
    """Base class for store failures."""


class InvalidInputError(GiftStoreError, ValueError):
    """A field was blank or out of range."""


class SelfGiftError(GiftStoreError, ValueError):
    """Sender and receiver are the same user."""


class UnknownGiftError(GiftStoreError, KeyError):
    """No gift with the given id."""

    def __str__(self) -> str:
        return f"unknown gift: {self.args[0]!r}" if self.args else "unknown gift"


# ─── Helpers ──────────────────────────────────────────────────────────────────


def _now_ms() -> int:
    return int(time.time() * 1000)


def _require(value: str, what: str) -> str:
    trimmed = value.strip()
    if not trimmed:
        raise InvalidInputError(f"{what} must not be blank")
    return trimmed


class GiftStore:
    """Users and gifts held in memory, keyed by id."""

    def __init__(
        self,
        users: list[User] | None = None,
        gifts: list[Gift] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._users: dict[str, User] = {u.id: u for u in users or []}
        self._gifts: dict[str, Gift] = {g.id: g for g in gifts or []}
        self._rng = rng or random.Random()

    def _new_id(self, prefix: str, length: int) -> str:
        suffix = "".join(self._rng.choices(string.ascii_lowercase + string.digits, k=length))
        return f"{prefix}{_now_ms()}-{suffix}"

    def _gift(self, gift_id: str) -> Gift:
        try:
            return self._gifts[gift_id]
        except KeyError:
            raise UnknownGiftError(gift_id) from None

    # ── Reads ──

    def list_users(self) -> list[User]:
        return list(self._users.values())

    def list_gifts(self) -> list[Gift]:
        """Gifts newest first, each with its comments oldest first."""
        gifts = sorted(self._gifts.values(), key=lambda g: g.timestamp, reverse=True)
        return [replace(g, comments=tuple(sorted(g.comments, key=lambda c: c.timestamp))) for g in gifts]

    def find_user(self, name: str) -> User | None:
        """Case-insensitive lookup by trimmed name."""
        wanted = name.strip().lower()
        for user in self._users.values():
            if user.name.lower() == wanted:
                return user
        return None

    # ── Writes ──

    def resolve_or_create_user(self, name: str) -> User:
        """Return the user called ``name`` (any case), creating it if needed."""
        trimmed = _require(name, "user name")
        existing = self.find_user(trimmed)
        if existing is not None:
            return existing

        user = User(
            id=self._new_id("u", 7),
            name=trimmed,
            avatar=f"https://picsum.photos/seed/{quote(trimmed, safe='')}/100/100",
            color=f"hsl({self._rng.randrange(360)}, 70%, 60%)",
        )
        self._users[user.id] = user
        logger.info("created user %s (%s)", user.id, user.name)
        return user

    def record_gift(self, sender_id: str, receiver_id: str, item: str) -> Gift:
        if sender_id == receiver_id:
            raise SelfGiftError(f"user {sender_id!r} cannot give a gift to themselves")
        gift = Gift(
            id=self._new_id("g", 5),
            sender_id=sender_id,
            receiver_id=receiver_id,
            item=_require(item, "gift item"),
            timestamp=_now_ms(),
        )
        self._gifts[gift.id] = gift
        logger.info("recorded gift %s: %s -> %s", gift.id, sender_id, receiver_id)
        return gift

    def give(self, sender_name: str, receiver_name: str, item: str) -> Gift:
        """Resolve both names and record the gift.

        The self-gift check runs on names first, so a rejected gift never
        creates users as a side effect.
        """
        sender = _require(sender_name, "sender name")
        receiver = _require(receiver_name, "receiver name")
        _require(item, "gift item")
        if sender.lower() == receiver.lower():
            raise SelfGiftError(f"{sender!r} cannot give a gift to themselves")
        return self.record_gift(
            self.resolve_or_create_user(sender).id,
            self.resolve_or_create_user(receiver).id,
            item,
        )

    def update_gift(self, gift_id: str, sender_id: str, receiver_id: str, item: str) -> None:
        gift = self._gift(gift_id)
        if sender_id == receiver_id:
            raise SelfGiftError(f"user {sender_id!r} cannot give a gift to themselves")
        self._gifts[gift_id] = replace(
            gift,
            sender_id=sender_id,
            receiver_id=receiver_id,
            item=_require(item, "gift item"),
        )
        logger.info("updated gift %s", gift_id)

    def delete_gift(self, gift_id: str) -> None:
        self._gift(gift_id)
        del self._gifts[gift_id]
        logger.info("deleted gift %s", gift_id)

    def add_comment(self, gift_id: str, user_name: str, text: str) -> Comment:
        gift = self._gift(gift_id)
        comment = Comment(
            id=self._new_id("c", 5),
            user_name=_require(user_name, "commenter name"),
            text=_require(text, "comment text"),
            timestamp=_now_ms(),
        )
        self._gifts[gift_id] = replace(gift, comments=(*gift.comments, comment))
        logger.info("comment %s added to gift %s", comment.id, gift_id)
        return comment

    def increment_tip(self, gift_id: str, current_tips: int) -> None:
        """Set tips to ``current_tips + 1`` (the caller's view of the count)."""
        gift = self._gift(gift_id)
        if current_tips < 0:
            raise InvalidInputError(f"tip count must not be negative, got {current_tips}")
        self._gifts[gift_id] = replace(gift, tips=current_tips + 1)
        logger.debug("gift %s tipped (%d)", gift_id, current_tips + 1)


# ─── Sample Data ──────────────────────────────────────────────────────────────

_HOUR = 60 * 60 * 1000
_DAY = 24 * _HOUR


def sample_store(now_ms: int | None = None) -> GiftStore:
    """A store seeded with five users and six gifts forming a loop or two."""
    now = _now_ms() if now_ms is None else now_ms

    def avatar(seed: str) -> str:
        return f"https://picsum.photos/seed/{seed}/100/100"

    users = [
        User("u1", "Alice", avatar("alice"), "#FF6B6B"),
        User("u2", "Bob", avatar("bob"), "#4ECDC4"),
        User("u3", "Charlie", avatar("charlie"), "#45B7D1"),
        User("u4", "Diana", avatar("diana"), "#F9A826"),
        User("u5", "Eve", avatar("eve"), "#9B59B6"),
    ]
    gifts = [
        Gift(
            "g1",
            "u1",
            "u2",
            "Coffee",
            now - 2 * _DAY,
            tips=5,
            comments=(
                Comment("c1", "Charlie", "Lucky! I want one too", now - int(1.5 * _DAY)),
                Comment("c2", "Bob", "It was delicious, thanks!", now - _DAY),
            ),
        ),
        Gift("g2", "u2", "u3", "Book", now - _DAY, tips=2),
        Gift(
            "g3",
            "u3",
            "u1",
            "Lunch",
            now - 5 * _HOUR,
            tips=12,
            comments=(Comment("c3", "Diana", "Which place did you go to?", now - 2 * _HOUR),),
        ),
        Gift("g4", "u4", "u5", "House plant", now - 2 * _HOUR, tips=0),
        Gift(
            "g5",
            "u5",
            "u1",
            "Help with the project",
            now - 30 * 60 * 1000,
            tips=8,
            comments=(Comment("c4", "Alice", "You really saved me", now - 10 * 60 * 1000),),
        ),
        Gift("g6", "u2", "u4", "Movie tickets", now - 15 * 60 * 1000, tips=1),
    ]
    return GiftStore(users=users, gifts=gifts)
