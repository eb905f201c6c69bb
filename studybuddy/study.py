"""StudyQueue: flashcard study state for one category, independent of the CLI."""

import random

from studybuddy.models import Card


class StudyQueue:
    def __init__(self, cards: list[Card]):
        if not cards:
            raise ValueError("Add some cards first!")
        self.cards = list(cards)
        self.index = 0
        self.flipped = False

    @property
    def current(self) -> Card:
        return self.cards[self.index]

    @property
    def progress(self) -> str:
        return f"{self.index + 1} / {len(self.cards)}"

    @property
    def at_end(self) -> bool:
        return self.index == len(self.cards) - 1

    def flip(self) -> bool:
        self.flipped = not self.flipped
        return self.flipped

    def next(self) -> bool:
        """Advance one card. Returns False on the last card, where the caller may restart()."""
        if self.at_end:
            return False
        self.index += 1
        self.flipped = False
        return True

    def prev(self) -> bool:
        if self.index == 0:
            return False
        self.index -= 1
        self.flipped = False
        return True

    def restart(self):
        self.index = 0
        self.flipped = False

    def shuffle(self, rng: random.Random | None = None):
        rng = rng or random.Random()
        rng.shuffle(self.cards)
        self.restart()
