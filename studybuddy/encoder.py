"""Command encoder: turns the deck into the reviewer's wire commands.

Wire format (ASCII command names, UTF-8 text, one command per write):

    CLEAR                     drop every card stored on the device
    ADD|<cat>|<question>|<answer>

Field text is not escaped. A question or answer containing ``|`` reaches
the device with extra fields; use ``ambiguous_cards`` to warn about them.
"""

from typing import Iterable, Iterator

from studybuddy.models import Card

RESET_COMMAND = "CLEAR"
UPSERT_COMMAND = "ADD"
DELIMITER = "|"


def encode_reset() -> str:
    return RESET_COMMAND


def encode_upsert(card: Card, include_category: bool = True) -> str:
    """Encode one card; ``include_category=False`` emits the older ``ADD|q|a`` form."""
    fields = [UPSERT_COMMAND]
    if include_category:
        fields.append(str(card.category_index))
    fields.extend([card.question, card.answer])
    return DELIMITER.join(fields)


def encode_deck(cards: Iterable[Card], include_category: bool = True) -> Iterator[str]:
    yield encode_reset()
    for card in cards:
        yield encode_upsert(card, include_category)


def ambiguous_cards(cards: Iterable[Card]) -> list[Card]:
    return [c for c in cards if DELIMITER in c.question or DELIMITER in c.answer]
