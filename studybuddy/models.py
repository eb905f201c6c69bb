"""Shared data classes: cards, categories, and sync session outcomes."""

import enum
from dataclasses import dataclass


@dataclass(frozen=True)
class Category:
    id: int
    name: str
    short: str
    color: str


CATEGORIES = (
    Category(0, "Psychological Assessment", "PA", "var(--cat-0)"),
    Category(1, "Industrial Organizational Psych", "IO", "var(--cat-1)"),
    Category(2, "Abnormal Psychology", "AP", "var(--cat-2)"),
    Category(3, "Developmental Psychology", "DP", "var(--cat-3)"),
)


def get_category(index: int) -> Category:
    if isinstance(index, bool) or not isinstance(index, int) \
            or not 0 <= index < len(CATEGORIES):
        raise ValueError(f"Unknown category: {index!r}")
    return CATEGORIES[index]


@dataclass(frozen=True)
class Card:
    id: int
    cat: int | None
    question: str
    answer: str

    @property
    def category_index(self) -> int:
        """Category used on the wire; stores written before categories existed default to 0."""
        return self.cat if self.cat is not None else 0

    @classmethod
    def from_record(cls, record: dict) -> "Card":
        cat = record.get("cat")
        if cat is not None:
            get_category(cat)
        return cls(id=record["id"], cat=cat,
                   question=record["q"], answer=record["a"])

    def to_record(self) -> dict:
        record = {"id": self.id}
        if self.cat is not None:
            record["cat"] = self.cat
        record["q"] = self.question
        record["a"] = self.answer
        return record


class Phase(enum.Enum):
    IDLE = "idle"
    DISCOVERING = "discovering"
    CONNECTING = "connecting"
    RESOLVING_SERVICE = "resolving_service"
    RESOLVING_CHARACTERISTIC = "resolving_characteristic"
    TRANSMITTING = "transmitting"
    COMPLETED = "completed"
    FAILED = "failed"
    DISCONNECTED = "disconnected"
    CANCELLED = "cancelled"


TERMINAL_PHASES = frozenset({Phase.COMPLETED, Phase.FAILED,
                             Phase.DISCONNECTED, Phase.CANCELLED})


@dataclass
class SyncResult:
    phase: Phase
    sent_count: int
    pending_count: int
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.phase is Phase.COMPLETED
