"""Tests for studybuddy.study."""

import random

import pytest

from studybuddy.models import Card
from studybuddy.study import StudyQueue


def _cards(n):
    return [Card(id=i, cat=0, question=f"q{i}", answer=f"a{i}") for i in range(n)]


def test_empty_queue_rejected():
    with pytest.raises(ValueError, match="Add some cards first"):
        StudyQueue([])


def test_flip_and_progress():
    q = StudyQueue(_cards(3))
    assert q.progress == "1 / 3"
    assert q.flip() is True
    assert q.flipped
    assert q.flip() is False


def test_next_resets_flip_and_stops_at_end():
    q = StudyQueue(_cards(2))
    q.flip()
    assert q.next() is True
    assert q.current.question == "q1"
    assert not q.flipped
    assert q.at_end
    assert q.next() is False
    assert q.progress == "2 / 2"


def test_prev_stops_at_start():
    q = StudyQueue(_cards(2))
    assert q.prev() is False
    q.next()
    assert q.prev() is True
    assert q.index == 0


def test_restart():
    q = StudyQueue(_cards(3))
    q.next()
    q.next()
    q.flip()
    q.restart()
    assert q.index == 0
    assert not q.flipped


def test_shuffle_is_permutation_and_restarts():
    cards = _cards(10)
    q = StudyQueue(cards)
    q.next()
    q.shuffle(random.Random(42))
    assert q.index == 0
    assert sorted(c.id for c in q.cards) == [c.id for c in cards]
    assert [c.id for c in cards] == list(range(10))
