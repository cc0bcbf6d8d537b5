from dataclasses import dataclass, field
from enum import Enum


class WritingTone(str, Enum):
    good = "good"
    bad = "bad"
    missing = "missing"


@dataclass(frozen=True)
class WritingSegment:
    char: str
    tone: WritingTone


@dataclass(frozen=True)
class WritingCheck:
    correct: bool
    segments: list[WritingSegment] = field(default_factory=list)


@dataclass(frozen=True)
class StudyCard:
    """What the study modes need to know about a card."""

    id: int
    phrase: str
    translation: str
    group_ids: tuple[int, ...] = ()


@dataclass(frozen=True)
class StudyGroup:
    id: int
    name: str
