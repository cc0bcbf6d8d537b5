from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, StringConstraints

from card_flasher.domain.study.dto import WritingTone
from card_flasher.domain.study.entities import StudyMode
from card_flasher.schemas.auth import TargetLanguage
from card_flasher.schemas.group import GroupSummaryResponse

Phrase = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=160)]

MAX_BULK_CARDS = 500
MAX_REGENERATE_CARDS = 50

CardIds = Annotated[list[PositiveInt], Field(min_length=1, max_length=MAX_BULK_CARDS)]


class CardResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: int
    phrase: str
    translation: str
    description_en: str
    examples_en: list[str]
    created_at: Optional[datetime] = None
    group_ids: list[int] = Field(default_factory=list, serialization_alias="groupIds")


class CardsResponse(BaseModel):
    cards: list[CardResponse]


class GenerateCardsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    phrases: Annotated[list[Phrase], Field(min_length=1, max_length=1000)]
    target_language: TargetLanguage = Field(alias="targetLanguage")
    group_ids: list[PositiveInt] = Field(default_factory=list, alias="groupIds")


class CountResponse(BaseModel):
    count: int


class ExamplesResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    examples_en: list[str] = Field(serialization_alias="examplesEn")


class WritingCheckRequest(BaseModel):
    input: Annotated[str, Field(max_length=500)]


class WritingSegmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    char: str
    tone: WritingTone


class WritingCheckResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    correct: bool
    segments: list[WritingSegmentResponse]


# -------------------------------
# Bulk actions
# -------------------------------
class _BulkBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    card_ids: CardIds = Field(alias="cardIds")


class BulkDelete(_BulkBase):
    action: Literal["delete"]


class BulkGroupAction(_BulkBase):
    action: Literal["addToGroup", "removeFromGroup", "moveToGroup"]
    group_id: PositiveInt = Field(alias="groupId")


class BulkRegenerate(_BulkBase):
    action: Literal["regenerate"]
    card_ids: Annotated[list[PositiveInt], Field(min_length=1, max_length=MAX_REGENERATE_CARDS)] = Field(
        alias="cardIds"
    )
    target_language: TargetLanguage = Field(alias="targetLanguage")


BulkRequest = Union[BulkDelete, BulkGroupAction, BulkRegenerate]


# -------------------------------
# Study views
# -------------------------------
class GroupBucketResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    group: GroupSummaryResponse
    cards: list[CardResponse]


class CardsOverviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    unsorted: list[CardResponse]
    groups: list[GroupBucketResponse] = Field(validation_alias="grouped")


class StudyStepResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    mode: StudyMode
    index: int
    total: int
    card: Optional[CardResponse] = None
    masked_examples: list[str] = Field(default_factory=list, serialization_alias="maskedExamples")
