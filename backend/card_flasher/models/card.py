from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, DateTime, ForeignKey, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from card_flasher.db.base import Base, BigIntId

if TYPE_CHECKING:
    from card_flasher.models.card_group import CardGroup
    from card_flasher.models.user import User


class Card(Base):
    __tablename__ = "cards"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        BigIntId,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    phrase: Mapped[str] = mapped_column(String, nullable=False)
    translation: Mapped[str] = mapped_column(String, nullable=False)
    description_en: Mapped[str] = mapped_column(String, nullable=False)
    # at most two English sentences
    examples_en: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    user: Mapped["User"] = relationship("User", back_populates="cards")

    group_links: Mapped[list["CardGroup"]] = relationship(
        "CardGroup",
        back_populates="card",
        cascade="all, delete-orphan",
    )


# phrases are unique per user regardless of case
Index("ix_cards_user_phrase_unique", Card.user_id, func.lower(Card.phrase), unique=True)
