# backend/card_flasher/domain/study/cards.py

import random
import re
from dataclasses import dataclass
from typing import Protocol, Sequence, TypeVar

ALL_GROUPS = "allGroups"
UNSORTED = "unsorted"

MASK = "______"

_WORD = re.compile(r"(?:[^\W_]|')+")


class HasGroups(Protocol):
    phrase: str
    translation: str
    group_ids: Sequence[int]


class HasId(Protocol):
    id: int


C = TypeVar("C", bound=HasGroups)
G = TypeVar("G", bound=HasId)


@dataclass(frozen=True)
class GroupBucket:
    group: object
    cards: list


@dataclass(frozen=True)
class SplitCards:
    unsorted: list
    grouped: list[GroupBucket]


def random_next_index(current: int, total: int, rng: random.Random | None = None) -> int:
    """Pick a random index different from ``current`` whenever there is a choice."""
    if total <= 1:
        return current

    rng = rng or random
    next_index = current
    while next_index == current:
        next_index = rng.randrange(total)
    return next_index


def filter_cards_by_study_group(cards: Sequence[C], study_filter: str | int) -> list[C]:
    if study_filter == ALL_GROUPS:
        return list(cards)

    if study_filter == UNSORTED:
        return [card for card in cards if not card.group_ids]

    try:
        group_id = int(study_filter)
    except (TypeError, ValueError):
        return []
    return [card for card in cards if group_id in card.group_ids]


def filter_cards_by_list_query(cards: Sequence[C], query: str) -> list[C]:
    needle = query.strip().lower()
    if not needle:
        return list(cards)

    return [
        card
        for card in cards
        if needle in card.phrase.lower() or needle in card.translation.lower()
    ]


def split_filtered_cards(cards: Sequence[C], groups: Sequence[G]) -> SplitCards:
    """Unsorted cards plus one bucket per group; empty buckets are dropped."""
    unsorted = [card for card in cards if not card.group_ids]
    grouped = []
    for group in groups:
        members = [card for card in cards if group.id in card.group_ids]
        if members:
            grouped.append(GroupBucket(group=group, cards=members))
    return SplitCards(unsorted=unsorted, grouped=grouped)


# -------------------------------
# Example masking
# -------------------------------
def _word_form_pattern(word: str) -> str:
    escaped = re.escape(word)

    if word.endswith("y") and len(word) > 2:
        stem = re.escape(word[:-1])
        return f"(?:{escaped}|{stem}ies|{escaped}s|{escaped}ed|{escaped}ing)"

    if word.endswith("e") and len(word) > 2:
        stem = re.escape(word[:-1])
        return f"(?:{escaped}|{escaped}s|{stem}ed|{stem}ing)"

    return f"{escaped}(?:s|es|ed|ing)?"


def mask_phrase_in_example(example: str, phrase: str) -> str:
    """
    Hide the studied phrase inside an example sentence.

    The whole phrase is replaced first (whole words only), then every word
    of it longer than one character together with its simple inflections
    (study -> studies, use -> used, walk -> walking).
    """
    clean = phrase.strip()
    if not clean:
        return example

    masked = re.sub(rf"(?<!\w){re.escape(clean)}(?!\w)", MASK, example, flags=re.IGNORECASE)

    words = dict.fromkeys(w for w in _WORD.findall(clean.lower()) if len(w) > 1)
    for word in words:
        pattern = rf"\b{_word_form_pattern(word)}\b"
        masked = re.sub(pattern, MASK, masked, flags=re.IGNORECASE)

    return masked
