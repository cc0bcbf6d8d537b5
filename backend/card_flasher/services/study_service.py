import random
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from card_flasher.domain.study.cards import (
    ALL_GROUPS,
    SplitCards,
    filter_cards_by_list_query,
    filter_cards_by_study_group,
    mask_phrase_in_example,
    split_filtered_cards,
)
from card_flasher.domain.study.entities import StudyMode, StudySession
from card_flasher.repositories.card_repo import CardRepository
from card_flasher.repositories.dto import CardView, CurrentUser
from card_flasher.repositories.group_repo import GroupRepository


@dataclass(frozen=True)
class StudyStep:
    mode: StudyMode
    index: int
    total: int
    card: CardView | None = None
    masked_examples: list[str] = field(default_factory=list)


class StudyService:
    """
    Feeds the study modes from the user's cards.
    The database is read once per call; the rules live in domain/study.
    """

    def __init__(self, db: Session, rng: random.Random | None = None):
        self.cards = CardRepository(db)
        self.groups = GroupRepository(db)
        self.rng = rng or random.Random()

    def list_cards(self, user: CurrentUser, study_filter: str = ALL_GROUPS, query: str = "") -> list[CardView]:
        cards = filter_cards_by_study_group(self.cards.list_cards(user.id), study_filter)
        return filter_cards_by_list_query(cards, query)

    def overview(self, user: CurrentUser, query: str = "") -> SplitCards:
        """List mode: unsorted cards plus one bucket per non-empty group."""
        cards = filter_cards_by_list_query(self.cards.list_cards(user.id), query)
        return split_filtered_cards(cards, self.groups.list_groups(user.id).groups)

    def next_card(
        self,
        user: CurrentUser,
        mode: StudyMode | str = StudyMode.random,
        study_filter: str = ALL_GROUPS,
        current: int | None = None,
    ) -> StudyStep:
        """
        Pick the card to show in random or writing mode.

        Without ``current`` the first card of the filter is shown, otherwise a
        random different one. Examples come back with the phrase masked so the
        writing prompt does not give the answer away.
        """
        session = StudySession(cards=self.cards.list_cards(user.id), rng=self.rng)
        session.set_mode(mode)
        session.set_group_filter(study_filter)
        writing = session.mode == StudyMode.writing

        if current is not None:
            if writing:
                session.writing_index = current
                session.next_writing()
            else:
                session.index = current
                session.next_random()

        total = len(session.study_cards)
        if total == 0:
            return StudyStep(mode=session.mode, index=0, total=0)

        card = session.writing_card if writing else session.active_card
        index = (session.writing_index if writing else session.index) % total
        return StudyStep(
            mode=session.mode,
            index=index,
            total=total,
            card=card,
            masked_examples=[mask_phrase_in_example(example, card.phrase) for example in card.examples_en],
        )
