from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from card_flasher.db.base import Base, BigIntId

if TYPE_CHECKING:
    from card_flasher.models.card import Card
    from card_flasher.models.group import Group


class CardGroup(Base):
    __tablename__ = "card_groups"

    card_id: Mapped[int] = mapped_column(
        BigIntId,
        ForeignKey("cards.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    group_id: Mapped[int] = mapped_column(
        BigIntId,
        ForeignKey("groups.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    card: Mapped["Card"] = relationship("Card", back_populates="group_links")
    group: Mapped["Group"] = relationship("Group", back_populates="card_links")
