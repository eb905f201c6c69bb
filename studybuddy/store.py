"""Card Store: the ordered local deck, persisted as one JSON blob."""

import json
import sqlite3
import time

from studybuddy.db import get_value, set_value
from studybuddy.models import CATEGORIES, Card, get_category

STORE_KEY = "studyCards"


class CardStore:
    """Authoritative, ordered card collection.

    Every mutation rewrites the whole blob under ``STORE_KEY``. The store
    fires no events; readers pull from it.
    """

    def __init__(self, conn: sqlite3.Connection, key: str = STORE_KEY):
        self.conn = conn
        self.key = key
        self._cards: list[Card] = self._load()

    def _load(self) -> list[Card]:
        blob = get_value(self.conn, self.key)
        if blob is None:
            return []
        return [Card.from_record(r) for r in json.loads(blob)]

    def _save(self):
        set_value(self.conn, self.key,
                  json.dumps([c.to_record() for c in self._cards], ensure_ascii=False))

    def __len__(self) -> int:
        return len(self._cards)

    def list_cards(self) -> list[Card]:
        return list(self._cards)

    def cards_in_category(self, cat: int) -> list[Card]:
        return [c for c in self._cards if c.category_index == cat]

    def count_by_category(self) -> dict[int, int]:
        counts = {category.id: 0 for category in CATEGORIES}
        for card in self._cards:
            if card.category_index in counts:
                counts[card.category_index] += 1
        return counts

    def add_card(self, cat: int, question: str, answer: str) -> Card:
        get_category(cat)
        question = question.strip()
        answer = answer.strip()
        if not question or not answer:
            raise ValueError("Question and answer must both be non-empty")
        card = Card(id=self._next_id(), cat=cat, question=question, answer=answer)
        self._cards.append(card)
        self._save()
        return card

    def remove_card(self, card_id: int) -> bool:
        remaining = [c for c in self._cards if c.id != card_id]
        if len(remaining) == len(self._cards):
            return False
        self._cards = remaining
        self._save()
        return True

    def clear_category(self, cat: int) -> int:
        get_category(cat)
        remaining = [c for c in self._cards if c.category_index != cat]
        removed = len(self._cards) - len(remaining)
        if removed:
            self._cards = remaining
            self._save()
        return removed

    def clear(self):
        self._cards = []
        self._save()

    def _next_id(self) -> int:
        # Millisecond timestamp, bumped past the newest id so two adds in
        # the same millisecond never collide.
        candidate = int(time.time() * 1000)
        if self._cards:
            candidate = max(candidate, max(c.id for c in self._cards) + 1)
        return candidate
