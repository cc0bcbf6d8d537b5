from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class CurrentUser:
    id: int
    email: str
    target_language: str


@dataclass(frozen=True)
class CardContent:
    phrase: str
    translation: str
    description_en: str
    examples_en: list[str]


@dataclass(frozen=True)
class CardView:
    id: int
    phrase: str
    translation: str
    description_en: str
    examples_en: list[str]
    created_at: datetime | None
    group_ids: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class GroupSummary:
    id: int
    name: str
    card_count: int


@dataclass(frozen=True)
class GroupListing:
    groups: list[GroupSummary]
    unsorted_count: int
