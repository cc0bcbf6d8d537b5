# backend/card_flasher/domain/study/entities.py

import random
from dataclasses import dataclass, field
from enum import Enum

from .cards import ALL_GROUPS, HasGroups, filter_cards_by_study_group, random_next_index
from .diff import build_writing_segments, is_writing_correct
from .dto import WritingCheck


class StudyMode(str, Enum):
    random = "random"
    writing = "writing"
    list = "list"


@dataclass
class StudySession:
    """
    State of one study screen.
    Knows nothing about the database or HTTP, works on a snapshot of cards
    (anything with phrase, translation and group_ids).
    """

    cards: list[HasGroups]
    mode: StudyMode = StudyMode.random
    group_filter: str = ALL_GROUPS

    index: int = 0
    revealed: bool = False

    writing_index: int = 0
    writing_input: str = ""
    writing_checked: bool = False

    list_query: str = ""
    selected_ids: list[int] = field(default_factory=list)

    rng: random.Random = field(default_factory=random.Random, repr=False)

    # ---------
    # Views
    # ---------

    @property
    def study_cards(self) -> list[HasGroups]:
        return filter_cards_by_study_group(self.cards, self.group_filter)

    @property
    def active_card(self) -> HasGroups | None:
        cards = self.study_cards
        return cards[self.index % len(cards)] if cards else None

    @property
    def writing_card(self) -> HasGroups | None:
        cards = self.study_cards
        return cards[self.writing_index % len(cards)] if cards else None

    # ----------------
    # Transitions
    # ----------------

    def set_mode(self, mode: StudyMode | str):
        self.mode = StudyMode(mode)

    def set_group_filter(self, value: str):
        self.group_filter = value
        self.index = 0
        self.writing_index = 0
        self.writing_input = ""
        self.writing_checked = False

    def toggle_reveal(self):
        self.revealed = not self.revealed

    def next_random(self):
        self.index = random_next_index(self.index, len(self.study_cards), self.rng)
        self.revealed = False

    def type(self, value: str):
        self.writing_input = value
        self.writing_checked = False

    def check(self) -> WritingCheck | None:
        card = self.writing_card
        if card is None:
            return None

        self.writing_checked = True
        return WritingCheck(
            correct=is_writing_correct(card.phrase, self.writing_input),
            segments=build_writing_segments(card.phrase, self.writing_input),
        )

    def next_writing(self):
        self.writing_index = random_next_index(self.writing_index, len(self.study_cards), self.rng)
        self.writing_input = ""
        self.writing_checked = False

    def submit(self) -> WritingCheck | None:
        """Enter key in writing mode: check first, move on when already checked."""
        if self.writing_checked:
            self.next_writing()
            return None
        return self.check()

    def toggle_selection(self, card_id: int):
        if card_id in self.selected_ids:
            self.selected_ids = [i for i in self.selected_ids if i != card_id]
        else:
            self.selected_ids = [*self.selected_ids, card_id]
