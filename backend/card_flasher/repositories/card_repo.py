import logging
from typing import Iterable, Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from card_flasher.models.card import Card
from card_flasher.models.card_group import CardGroup
from card_flasher.models.group import Group
from card_flasher.repositories.dto import CardContent, CardView

logger = logging.getLogger(__name__)

MAX_EXAMPLES = 2


def clean_examples(examples: Iterable[str]) -> list[str]:
    return [item.strip() for item in examples if item and item.strip()][:MAX_EXAMPLES]


def normalize_ids(values: Iterable[int]) -> list[int]:
    result: list[int] = []
    for value in values:
        if isinstance(value, int) and value > 0 and value not in result:
            result.append(value)
    return result


class CardRepository:
    def __init__(self, db: Session):
        self.db = db

    # -------------------------------
    # Reads
    # -------------------------------
    def get_card(self, user_id: int, card_id: int) -> Card | None:
        return self.db.execute(
            select(Card).where(Card.id == card_id, Card.user_id == user_id)
        ).scalar_one_or_none()

    def get_card_phrase(self, user_id: int, card_id: int) -> str | None:
        return self.db.execute(
            select(Card.phrase).where(Card.id == card_id, Card.user_id == user_id)
        ).scalar_one_or_none()

    def get_cards_by_ids(self, user_id: int, card_ids: Sequence[int]) -> list[Card]:
        ids = normalize_ids(card_ids)
        if not ids:
            return []
        stmt = (
            select(Card)
            .where(Card.user_id == user_id, Card.id.in_(ids))
            .order_by(Card.id.asc())
        )
        return list(self.db.execute(stmt).scalars())

    def phrase_exists(self, user_id: int, phrase: str, *, exclude_card_id: int | None = None) -> bool:
        stmt = select(Card.id).where(
            Card.user_id == user_id,
            func.lower(Card.phrase) == phrase.strip().lower(),
        )
        if exclude_card_id is not None:
            stmt = stmt.where(Card.id != exclude_card_id)
        return self.db.execute(stmt.limit(1)).first() is not None

    def list_cards(self, user_id: int) -> list[CardView]:
        cards = self.db.execute(
            select(Card).where(Card.user_id == user_id).order_by(Card.id.desc())
        ).scalars().all()

        links = self.db.execute(
            select(CardGroup.card_id, CardGroup.group_id)
            .join(Card, Card.id == CardGroup.card_id)
            .where(Card.user_id == user_id)
            .order_by(CardGroup.group_id.asc())
        ).all()

        group_ids_by_card: dict[int, list[int]] = {}
        for card_id, group_id in links:
            group_ids_by_card.setdefault(card_id, []).append(group_id)

        return [
            CardView(
                id=card.id,
                phrase=card.phrase,
                translation=card.translation,
                description_en=card.description_en,
                examples_en=[e for e in (card.examples_en or []) if isinstance(e, str)],
                created_at=card.created_at,
                group_ids=group_ids_by_card.get(card.id, []),
            )
            for card in cards
        ]

    # -------------------------------
    # Writes
    # -------------------------------
    def create_cards(
        self,
        user_id: int,
        cards: Iterable[CardContent],
        group_ids: Sequence[int] = (),
    ) -> int:
        """Insert cards one by one, skipping phrases the user already has.

        Every inserted card is committed on its own, so a duplicate or a
        failure on one item never undoes the items before it. Group ids that
        do not belong to the user are ignored. Returns the number of cards
        actually inserted.
        """
        owned_group_ids = self._owned_group_ids(user_id, group_ids)
        inserted = 0

        for item in cards:
            phrase = item.phrase.strip()
            if not phrase or self.phrase_exists(user_id, phrase):
                continue

            card = Card(
                user_id=user_id,
                phrase=phrase,
                translation=item.translation.strip(),
                description_en=item.description_en.strip(),
                examples_en=clean_examples(item.examples_en),
            )
            card.group_links = [CardGroup(group_id=group_id) for group_id in owned_group_ids]
            self.db.add(card)
            try:
                self.db.commit()
            except IntegrityError:
                # same phrase inserted concurrently; the unique index wins
                self.db.rollback()
                logger.info(f"Skipped duplicate phrase for user {user_id}")
                continue
            inserted += 1

        return inserted

    def update_card_content(self, user_id: int, card_id: int, content: CardContent) -> bool:
        card = self.get_card(user_id, card_id)
        if card is None:
            return False

        phrase = content.phrase.strip()
        # keep the old phrase rather than collide with another card of the same user
        if phrase and not self.phrase_exists(user_id, phrase, exclude_card_id=card.id):
            card.phrase = phrase
        card.translation = content.translation.strip()
        card.description_en = content.description_en.strip()
        card.examples_en = clean_examples(content.examples_en)
        self.db.commit()
        return True

    def update_card_examples(self, user_id: int, card_id: int, examples: Sequence[str]) -> bool:
        card = self.get_card(user_id, card_id)
        if card is None:
            return False
        card.examples_en = clean_examples(examples)
        self.db.commit()
        return True

    def delete_card(self, user_id: int, card_id: int) -> bool:
        card = self.get_card(user_id, card_id)
        if card is None:
            return False
        self.db.delete(card)
        self.db.commit()
        return True

    def delete_cards(self, user_id: int, card_ids: Sequence[int]) -> int:
        cards = self.get_cards_by_ids(user_id, card_ids)
        for card in cards:
            self.db.delete(card)
        self.db.commit()
        return len(cards)

    def _owned_group_ids(self, user_id: int, group_ids: Sequence[int]) -> list[int]:
        ids = normalize_ids(group_ids)
        if not ids:
            return []
        return list(
            self.db.execute(
                select(Group.id).where(Group.user_id == user_id, Group.id.in_(ids)).order_by(Group.id)
            ).scalars()
        )
