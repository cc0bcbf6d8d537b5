import logging
from typing import Sequence

from sqlalchemy import delete, exists, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from card_flasher.core.errors import CardFlasherError, ValidationError
from card_flasher.core.result import Err, Ok, Result
from card_flasher.models.card import Card
from card_flasher.models.card_group import CardGroup
from card_flasher.models.group import RESERVED_GROUP_NAMES, Group
from card_flasher.repositories.card_repo import normalize_ids
from card_flasher.repositories.dto import GroupListing, GroupSummary

logger = logging.getLogger(__name__)


class GroupRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_group(self, user_id: int, group_id: int) -> Group | None:
        return self.db.execute(
            select(Group).where(Group.id == group_id, Group.user_id == user_id)
        ).scalar_one_or_none()

    def get_by_name(self, user_id: int, name: str) -> Group | None:
        return self.db.execute(
            select(Group)
            .where(Group.user_id == user_id, func.lower(Group.name) == name.strip().lower())
            .limit(1)
        ).scalar_one_or_none()

    def create_group(self, user_id: int, raw_name: str) -> Result[Group, CardFlasherError]:
        """Create a group, or return the user's existing group with the same name in any case."""
        name = raw_name.strip()
        if not name:
            return Err(ValidationError("Group name is required."))
        if name.lower() in RESERVED_GROUP_NAMES:
            return Err(ValidationError(f'Group name "{name.lower()}" is reserved.'))

        existing = self.get_by_name(user_id, name)
        if existing is not None:
            return Ok(existing)

        group = Group(user_id=user_id, name=name)
        self.db.add(group)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            existing = self.get_by_name(user_id, name)
            if existing is None:
                return Err(CardFlasherError("Failed to create group."))
            return Ok(existing)

        self.db.refresh(group)
        return Ok(group)

    def list_groups(self, user_id: int) -> GroupListing:
        rows = self.db.execute(
            select(Group.id, Group.name, func.count(CardGroup.card_id).label("card_count"))
            .outerjoin(CardGroup, CardGroup.group_id == Group.id)
            .where(Group.user_id == user_id)
            .group_by(Group.id, Group.name)
            .order_by(Group.name.asc())
        ).all()

        unsorted_count = self.db.execute(
            select(func.count(Card.id)).where(
                Card.user_id == user_id,
                ~exists().where(CardGroup.card_id == Card.id),
            )
        ).scalar_one()

        return GroupListing(
            groups=[GroupSummary(id=row.id, name=row.name, card_count=int(row.card_count)) for row in rows],
            unsorted_count=int(unsorted_count or 0),
        )

    # -------------------------------
    # Card membership
    # -------------------------------
    def add_cards(self, user_id: int, card_ids: Sequence[int], group_id: int) -> int:
        if not normalize_ids(card_ids) or self.get_group(user_id, group_id) is None:
            return 0
        added = self._link(user_id, card_ids, group_id)
        self.db.commit()
        return added

    def remove_cards(self, user_id: int, card_ids: Sequence[int], group_id: int) -> int:
        ids = normalize_ids(card_ids)
        if not ids or self.get_group(user_id, group_id) is None:
            return 0
        result = self.db.execute(
            delete(CardGroup)
            .where(
                CardGroup.group_id == group_id,
                CardGroup.card_id.in_(self._owned_card_ids_query(user_id, ids)),
            )
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount or 0

    def move_cards(self, user_id: int, card_ids: Sequence[int], group_id: int) -> int:
        """Make ``group_id`` the only group of the given cards.

        The target group is checked before anything is removed, so an unknown
        or foreign group leaves existing memberships untouched and moves 0.
        """
        ids = normalize_ids(card_ids)
        if not ids:
            return 0
        if self.get_group(user_id, group_id) is None:
            logger.info(f"Move to group {group_id} ignored: not owned by user {user_id}")
            return 0

        self.db.execute(
            delete(CardGroup)
            .where(CardGroup.card_id.in_(self._owned_card_ids_query(user_id, ids)))
            .execution_options(synchronize_session=False)
        )
        moved = self._link(user_id, ids, group_id)
        self.db.commit()
        return moved

    def _owned_card_ids_query(self, user_id: int, card_ids: list[int]):
        return select(Card.id).where(Card.user_id == user_id, Card.id.in_(card_ids))

    def _link(self, user_id: int, card_ids: Sequence[int], group_id: int) -> int:
        ids = normalize_ids(card_ids)
        owned = self.db.execute(self._owned_card_ids_query(user_id, ids)).scalars().all()
        if not owned:
            return 0
        already = set(
            self.db.execute(
                select(CardGroup.card_id).where(
                    CardGroup.group_id == group_id,
                    CardGroup.card_id.in_(owned),
                )
            ).scalars()
        )
        new_links = [CardGroup(card_id=card_id, group_id=group_id) for card_id in owned if card_id not in already]
        self.db.add_all(new_links)
        return len(new_links)
