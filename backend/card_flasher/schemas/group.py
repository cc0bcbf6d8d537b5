from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

GroupName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=60)]


class GroupCreate(BaseModel):
    name: GroupName


class GroupResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class GroupCreated(BaseModel):
    group: GroupResponse


class GroupSummaryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: int
    name: str
    card_count: int = Field(serialization_alias="cardCount")


class GroupListResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    groups: list[GroupSummaryResponse]
    unsorted_count: int = Field(serialization_alias="unsortedCount")
