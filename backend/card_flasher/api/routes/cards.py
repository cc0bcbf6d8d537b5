from typing import Annotated, Literal, Optional

from fastapi import APIRouter, Body, Depends, Query

from card_flasher.api.deps import get_card_service, get_study_service
from card_flasher.auth.dependencies import require_user
from card_flasher.core.result import unwrap
from card_flasher.domain.study.cards import ALL_GROUPS
from card_flasher.repositories.dto import CurrentUser
from card_flasher.schemas.auth import OkResponse
from card_flasher.schemas.cards import (
    BulkRegenerate,
    BulkRequest,
    CardResponse,
    CardsOverviewResponse,
    CardsResponse,
    CountResponse,
    ExamplesResponse,
    GenerateCardsRequest,
    StudyStepResponse,
    WritingCheckRequest,
    WritingCheckResponse,
)
from card_flasher.services.card_service import CardService
from card_flasher.services.study_service import StudyService

router = APIRouter()


@router.get("", response_model=CardsResponse)
def list_cards(
    group: str = Query(ALL_GROUPS, description="allGroups, unsorted or a group id"),
    q: str = Query("", max_length=160),
    user: CurrentUser = Depends(require_user),
    service: StudyService = Depends(get_study_service),
):
    cards = service.list_cards(user, group, q)
    return CardsResponse(cards=[CardResponse.model_validate(card) for card in cards])


@router.get("/overview", response_model=CardsOverviewResponse)
def cards_overview(
    q: str = Query("", max_length=160),
    user: CurrentUser = Depends(require_user),
    service: StudyService = Depends(get_study_service),
):
    return CardsOverviewResponse.model_validate(service.overview(user, q))


@router.get("/study", response_model=StudyStepResponse)
def study_card(
    mode: Literal["random", "writing"] = "random",
    group: str = Query(ALL_GROUPS),
    index: Optional[int] = Query(None, ge=0, description="Card currently shown; omit for the first one"),
    user: CurrentUser = Depends(require_user),
    service: StudyService = Depends(get_study_service),
):
    return StudyStepResponse.model_validate(service.next_card(user, mode, group, index))


@router.post("/generate", response_model=CountResponse)
def generate_cards(
    data: GenerateCardsRequest,
    user: CurrentUser = Depends(require_user),
    service: CardService = Depends(get_card_service),
):
    count = unwrap(service.generate_cards(user, data.phrases, data.target_language, data.group_ids))
    return CountResponse(count=count)


# -------------------------------
# Bulk, declared before /{card_id} routes
# -------------------------------
@router.post("/bulk", response_model=CountResponse)
def bulk_action(
    data: Annotated[BulkRequest, Body(discriminator="action")],
    user: CurrentUser = Depends(require_user),
    service: CardService = Depends(get_card_service),
):
    count = unwrap(
        service.run_bulk_action(
            user,
            data.action,
            data.card_ids,
            group_id=getattr(data, "group_id", None),
            target_language=data.target_language if isinstance(data, BulkRegenerate) else None,
        )
    )
    return CountResponse(count=count)


@router.post("/{card_id}/examples", response_model=ExamplesResponse)
def regenerate_examples(
    card_id: int,
    user: CurrentUser = Depends(require_user),
    service: CardService = Depends(get_card_service),
):
    examples = unwrap(service.regenerate_examples(user, card_id))
    return ExamplesResponse(examples_en=examples)


@router.post("/{card_id}/writing-check", response_model=WritingCheckResponse)
def check_writing(
    card_id: int,
    data: WritingCheckRequest,
    user: CurrentUser = Depends(require_user),
    service: CardService = Depends(get_card_service),
):
    return WritingCheckResponse.model_validate(unwrap(service.check_writing(user, card_id, data.input)))


@router.delete("/{card_id}", response_model=OkResponse)
def delete_card(
    card_id: int,
    user: CurrentUser = Depends(require_user),
    service: CardService = Depends(get_card_service),
):
    unwrap(service.delete_card(user, card_id))
    return OkResponse()
