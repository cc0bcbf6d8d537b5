from fastapi import Depends, Request
from sqlalchemy.orm import Session

from card_flasher.core.config import Settings
from card_flasher.core.config import settings as default_settings
from card_flasher.db.session import get_db
from card_flasher.services.card_service import CardService
from card_flasher.services.content_generation import ContentGenerator
from card_flasher.services.study_service import StudyService


def get_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or default_settings


def get_content_generator(request: Request) -> ContentGenerator:
    return request.app.state.content_generator


def get_card_service(
    db: Session = Depends(get_db),
    generator: ContentGenerator = Depends(get_content_generator),
    settings: Settings = Depends(get_settings),
) -> CardService:
    return CardService(db, generator, settings)


def get_study_service(db: Session = Depends(get_db)) -> StudyService:
    return StudyService(db)
