"""
Content generation for cards through the Gemini API.

The model is asked for strict JSON; its answer goes through three explicit
steps before anything reaches the database:

1. ``strip_code_fences`` removes a markdown fence the model may add anyway.
2. ``json.loads`` parses the remaining text once.
3. A pydantic ``TypeAdapter`` checks the shape (non-empty strings,
   exactly two examples).

Every failure comes back as ``Err(UpstreamError)`` (``SchemaViolation`` for
bad output); nothing is retried automatically.
"""
import json
import logging
import re
from typing import Annotated, Any, Protocol, Sequence, TypeVar

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions
from pydantic import BaseModel, ConfigDict, Field, StringConstraints, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from card_flasher.core.errors import SchemaViolation, UpstreamError
from card_flasher.core.result import Err, Ok, Result
from card_flasher.repositories.dto import CardContent

logger = logging.getLogger(__name__)

T = TypeVar("T")

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
TwoExamples = Annotated[list[NonEmptyStr], Field(min_length=2, max_length=2)]

_LEADING_FENCE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\s*```\s*$")


class GeneratedCard(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    phrase: NonEmptyStr
    translation: NonEmptyStr
    description_en: NonEmptyStr = Field(alias="descriptionEn")
    examples_en: TwoExamples = Field(alias="examplesEn")

    def to_content(self) -> CardContent:
        return CardContent(
            phrase=self.phrase,
            translation=self.translation,
            description_en=self.description_en,
            examples_en=list(self.examples_en),
        )


GENERATED_CARDS = TypeAdapter(list[GeneratedCard])
GENERATED_EXAMPLES = TypeAdapter(TwoExamples)


CARDS_PROMPT = """
You are generating flash cards for English learning.

Task:
- For each input English phrase/word, generate:
  1) translation: translate to {target_language}
  2) descriptionEn: concise explanation in English (meaning + usage context)
  3) examplesEn: exactly 2 short, natural example sentences in English

Rules:
- Normalize each input to its base dictionary form before returning "phrase":
  - verbs -> infinitive/base form (e.g., "went" -> "go", "running" -> "run")
  - nouns -> singular base form when applicable
  - short phrases -> canonical/base wording while preserving original meaning
- descriptionEn must always be in English.
- examplesEn must always be in English and contain exactly 2 items.
- Return strict JSON array only. No markdown. No code fences.
- JSON schema per item:
  {{
    "phrase": "string",
    "translation": "string",
    "descriptionEn": "string",
    "examplesEn": ["string", "string"]
  }}

Input phrases:
{phrases}
"""

EXAMPLES_PROMPT = """
You generate English usage examples for a flash card.

Task:
- Create exactly 2 short, natural English example sentences for this phrase/word:
  "{phrase}"

Rules:
- Return strict JSON array only.
- No markdown. No code fences.
- Exactly 2 string items.

Output format:
["example sentence 1", "example sentence 2"]
"""


def strip_code_fences(text: str) -> str:
    cleaned = text.strip()
    cleaned = _LEADING_FENCE.sub("", cleaned)
    cleaned = _TRAILING_FENCE.sub("", cleaned)
    return cleaned.strip()


def parse_model_output(text: str, adapter: TypeAdapter[T]) -> Result[T, SchemaViolation]:
    cleaned = strip_code_fences(text)
    try:
        payload: Any = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error(f"Model returned invalid JSON: {e}; text: {cleaned[:500]}")
        return Err(SchemaViolation(f"Model returned invalid JSON: {e.msg}"))

    try:
        return Ok(adapter.validate_python(payload))
    except PydanticValidationError as e:
        logger.error(f"Model output does not match the expected shape: {e.errors()}")
        return Err(SchemaViolation("Model returned data in an unexpected format.", issues=e.errors(include_url=False)))


class TextGenerator(Protocol):
    def generate_text(self, prompt: str) -> Result[str, UpstreamError]:
        ...


class GeminiClient:
    """Thin wrapper around ``google.generativeai`` returning results instead of raising."""

    def __init__(self, api_key: str | None, model_name: str = "gemini-2.5-flash"):
        self.api_key = api_key
        self.model_name = model_name

    def generate_text(self, prompt: str) -> Result[str, UpstreamError]:
        if not self.api_key:
            return Err(UpstreamError("GOOGLE_API_KEY is missing in environment variables."))

        try:
            genai.configure(api_key=self.api_key)
            model = genai.GenerativeModel(self.model_name)
            response = model.generate_content(prompt)
        except google_exceptions.GoogleAPIError as e:
            logger.error(f"Gemini request failed ({self.model_name}): {e}")
            return Err(UpstreamError(f"Generation service request failed: {e}"))
        except Exception as e:
            logger.error(f"Unexpected error calling Gemini ({self.model_name}): {e}", exc_info=True)
            return Err(UpstreamError(f"Generation service request failed: {e}"))

        if not response.parts:
            logger.warning(f"Gemini returned no content. Feedback: {response.prompt_feedback}")
            return Err(UpstreamError("Google model returned empty response."))

        try:
            text = response.text
        except ValueError as e:
            # blocked candidates or multi-part responses have no quick text accessor
            logger.warning(f"Gemini response has no text ({self.model_name}): {e}")
            return Err(UpstreamError("Google model returned empty response."))

        if not text or not text.strip():
            return Err(UpstreamError("Google model returned empty response."))
        return Ok(text)


class ContentGenerator:
    def __init__(self, client: TextGenerator):
        self.client = client

    def generate_cards(self, phrases: Sequence[str], target_language: str) -> Result[list[CardContent], UpstreamError]:
        clean_phrases = [p.strip() for p in phrases if p and p.strip()]
        if not clean_phrases:
            return Ok([])

        prompt = CARDS_PROMPT.format(
            target_language=target_language.strip(),
            phrases=json.dumps(clean_phrases, indent=2, ensure_ascii=False),
        )
        text = self.client.generate_text(prompt)
        if isinstance(text, Err):
            return text

        parsed = parse_model_output(text.value, GENERATED_CARDS)
        if isinstance(parsed, Err):
            return parsed
        return Ok([card.to_content() for card in parsed.value])

    def generate_examples(self, phrase: str) -> Result[list[str], UpstreamError]:
        text = self.client.generate_text(EXAMPLES_PROMPT.format(phrase=phrase.strip()))
        if isinstance(text, Err):
            return text

        parsed = parse_model_output(text.value, GENERATED_EXAMPLES)
        if isinstance(parsed, Err):
            return parsed
        return Ok(list(parsed.value))
