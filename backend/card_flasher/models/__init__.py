from card_flasher.models.user import User
from card_flasher.models.session import UserSession
from card_flasher.models.card import Card
from card_flasher.models.group import Group
from card_flasher.models.card_group import CardGroup

__all__ = [
    "User",
    "UserSession",
    "Card",
    "Group",
    "CardGroup",
]
