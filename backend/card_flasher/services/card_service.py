import logging
from typing import Iterator, Sequence, TypeVar

from sqlalchemy.orm import Session

from card_flasher.core.config import Settings, settings as default_settings
from card_flasher.core.errors import CardFlasherError, NotFoundError, ValidationError
from card_flasher.core.result import Err, Ok, Result
from card_flasher.domain.study.diff import build_writing_segments, is_writing_correct
from card_flasher.domain.study.dto import WritingCheck
from card_flasher.repositories.card_repo import CardRepository
from card_flasher.repositories.dto import CurrentUser
from card_flasher.repositories.group_repo import GroupRepository
from card_flasher.repositories.user_repo import UserRepository
from card_flasher.services.content_generation import ContentGenerator

logger = logging.getLogger(__name__)

T = TypeVar("T")

CARD_NOT_FOUND = "Card not found."

BULK_ACTIONS = ("delete", "addToGroup", "removeFromGroup", "moveToGroup", "regenerate")
GROUP_ACTIONS = ("addToGroup", "removeFromGroup", "moveToGroup")


def chunked(items: Sequence[T], size: int) -> Iterator[list[T]]:
    for start in range(0, len(items), size):
        yield list(items[start:start + size])


def dedupe_phrases(phrases: Sequence[str]) -> list[str]:
    """Trim, drop blanks and keep the first spelling of case-insensitive repeats."""
    seen: set[str] = set()
    result: list[str] = []
    for raw in phrases:
        phrase = raw.strip()
        key = phrase.lower()
        if not phrase or key in seen:
            continue
        seen.add(key)
        result.append(phrase)
    return result


class CardService:
    def __init__(self, db: Session, generator: ContentGenerator, settings: Settings | None = None):
        settings = settings or default_settings
        self.cards = CardRepository(db)
        self.groups = GroupRepository(db)
        self.users = UserRepository(db, settings)
        self.generator = generator
        self.batch_size = settings.GENERATION_BATCH_SIZE

    def generate_cards(
        self,
        user: CurrentUser,
        phrases: Sequence[str],
        target_language: str,
        group_ids: Sequence[int] = (),
    ) -> Result[int, CardFlasherError]:
        """Generate and store cards batch by batch.

        Each batch is inserted as soon as the model answers, so when a later
        batch fails the cards from earlier batches stay in place.
        """
        clean = dedupe_phrases(phrases)
        if not clean:
            return Err(ValidationError("Please add at least one phrase."))

        inserted = 0
        for index, batch in enumerate(chunked(clean, self.batch_size)):
            generated = self.generator.generate_cards(batch, target_language)
            if isinstance(generated, Err):
                logger.warning(
                    f"Generation failed on batch {index + 1} for user {user.id}; "
                    f"{inserted} cards kept from earlier batches"
                )
                return generated
            inserted += self.cards.create_cards(user.id, generated.value, group_ids)

        self.users.update_target_language(user.id, target_language)
        logger.info(f"Generated {inserted} cards for user {user.id}")
        return Ok(inserted)

    def regenerate_examples(self, user: CurrentUser, card_id: int) -> Result[list[str], CardFlasherError]:
        phrase = self.cards.get_card_phrase(user.id, card_id)
        if phrase is None:
            return Err(NotFoundError(CARD_NOT_FOUND))

        examples = self.generator.generate_examples(phrase)
        if isinstance(examples, Err):
            return examples

        self.cards.update_card_examples(user.id, card_id, examples.value)
        return Ok(examples.value)

    def check_writing(self, user: CurrentUser, card_id: int, typed: str) -> Result[WritingCheck, NotFoundError]:
        phrase = self.cards.get_card_phrase(user.id, card_id)
        if phrase is None:
            return Err(NotFoundError(CARD_NOT_FOUND))
        return Ok(
            WritingCheck(
                correct=is_writing_correct(phrase, typed),
                segments=build_writing_segments(phrase, typed),
            )
        )

    def delete_card(self, user: CurrentUser, card_id: int) -> Result[bool, NotFoundError]:
        if not self.cards.delete_card(user.id, card_id):
            return Err(NotFoundError(CARD_NOT_FOUND))
        return Ok(True)

    # -------------------------------
    # Bulk actions
    # -------------------------------
    def run_bulk_action(
        self,
        user: CurrentUser,
        action: str,
        card_ids: Sequence[int],
        *,
        group_id: int | None = None,
        target_language: str | None = None,
    ) -> Result[int, CardFlasherError]:
        if action not in BULK_ACTIONS:
            return Err(ValidationError(f"Unknown bulk action: {action}"))
        if action in GROUP_ACTIONS and group_id is None:
            return Err(ValidationError("groupId is required for this action."))

        if action == "delete":
            count = self.cards.delete_cards(user.id, card_ids)
        elif action == "addToGroup":
            count = self.groups.add_cards(user.id, card_ids, group_id)
        elif action == "removeFromGroup":
            count = self.groups.remove_cards(user.id, card_ids, group_id)
        elif action == "moveToGroup":
            count = self.groups.move_cards(user.id, card_ids, group_id)
        else:
            if not target_language or not target_language.strip():
                return Err(ValidationError("targetLanguage is required for this action."))
            return self.regenerate_cards(user, card_ids, target_language)

        logger.info(f"Bulk {action} for user {user.id}: {count} of {len(card_ids)} cards")
        return Ok(count)

    def regenerate_cards(
        self,
        user: CurrentUser,
        card_ids: Sequence[int],
        target_language: str,
    ) -> Result[int, CardFlasherError]:
        """Rebuild translation, description and examples card by card.

        The model may also rewrite the phrase to its base form. The first
        failure stops the loop; cards updated before it keep their new content.
        """
        count = 0
        for card in self.cards.get_cards_by_ids(user.id, card_ids):
            generated = self.generator.generate_cards([card.phrase], target_language)
            if isinstance(generated, Err):
                logger.warning(f"Regenerate stopped after {count} cards for user {user.id}")
                return generated
            if not generated.value:
                continue
            if self.cards.update_card_content(user.id, card.id, generated.value[0]):
                count += 1
        return Ok(count)
