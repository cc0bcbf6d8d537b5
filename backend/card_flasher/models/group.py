from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from card_flasher.db.base import Base, BigIntId

if TYPE_CHECKING:
    from card_flasher.models.card_group import CardGroup
    from card_flasher.models.user import User

RESERVED_GROUP_NAMES = {"all"}


class Group(Base):
    __tablename__ = "groups"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        BigIntId,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    user: Mapped["User"] = relationship("User", back_populates="groups")

    card_links: Mapped[list["CardGroup"]] = relationship(
        "CardGroup",
        back_populates="group",
        cascade="all",
    )


Index("ix_groups_user_name_unique", Group.user_id, func.lower(Group.name), unique=True)
