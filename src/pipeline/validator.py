# src/pipeline/validator.py — v1
"""Two-stage input validator.

Stage 1 is a local gibberish check that always runs and never calls the
generation service. Stage 2 asks the service whether the pair is a
plausible place name. Stage 2 fails open: if the call errors, the input
is accepted with reason "Validation unavailable".
"""

from __future__ import annotations

import logging
import re

from mpfscore.cache.tiered_cache import TieredCache
from mpfscore.core.keys import normalize_text
from mpfscore.core.models import ValidationResult
from mpfscore.llm.errors import LLMInvalidJSONError
from mpfscore.llm.generation import GenerationAdapter
from mpfscore.pipeline.prompts import PURPOSE_VALIDATE, build_validation_prompt

logger = logging.getLogger(__name__)

INVALID_INPUT_REASON = "Invalid input. Enter a valid city and locality."
UNAVAILABLE_REASON = "Validation unavailable, proceeding."
SKIPPED_REASON = "Validation skipped (no API key)."

_DIGIT_RUN_RE = re.compile(r"[0-9]{5,}")
_DISALLOWED_CHAR_RE = re.compile(r"[^a-zA-Z0-9\s,.'-]")
_REPEATED_LETTER_RE = re.compile(r"([a-zA-Z])\1{3,}")
_NON_LETTER_RE = re.compile(r"[^a-zA-Z]")
_VOWEL_RE = re.compile(r"[aeiouAEIOU]")


def is_obviously_gibberish(value: str | None) -> bool:
    """Local Stage 1 rejection rules for one field."""
    text = normalize_text(value)
    if len(text) < 2:
        return True
    if _DIGIT_RUN_RE.search(text):
        return True
    if _DISALLOWED_CHAR_RE.search(text):
        return True
    if _REPEATED_LETTER_RE.search(text):
        return True

    letters = _NON_LETTER_RE.sub("", text)
    if len(letters) < 2:
        return True
    if not _VOWEL_RE.search(letters) and len(letters) > 4:
        return True

    return False


class InputValidator:
    """Validates (city, sector) pairs with a cache in front of Stage 2.

    Args:
        cache: Validation result cache.
        generator: Generation adapter; None skips Stage 2.
        country: Target market quoted in the prompt.
    """

    def __init__(
        self,
        cache: TieredCache[ValidationResult],
        generator: GenerationAdapter | None = None,
        country: str = "India",
    ) -> None:
        self._cache = cache
        self._generator = generator
        self._country = country

    async def validate(self, city: str, sector: str, key: str) -> ValidationResult:
        if is_obviously_gibberish(city) or is_obviously_gibberish(sector):
            invalid = ValidationResult(is_valid=False, reason=INVALID_INPUT_REASON)
            await self._cache.set(key, invalid)
            return invalid

        cached = await self._cache.get(key)
        if cached is not None:
            logger.debug("Validation cache hit")
            return cached

        if self._generator is None:
            return ValidationResult(is_valid=True, reason=SKIPPED_REASON)

        try:
            parsed = await self._generator.generate_json(
                PURPOSE_VALIDATE,
                key,
                build_validation_prompt(city, sector, self._country),
                ValidationResult,
                default='{"isValid": true, "reason": "Valid input."}',
            )
            result = _coerce_validation(parsed)
        except Exception as e:
            logger.warning("Validation unavailable, failing open: %s", e)
            return ValidationResult(is_valid=True, reason=UNAVAILABLE_REASON)

        await self._cache.set(key, result)
        return result


def _coerce_validation(parsed: object) -> ValidationResult:
    if not isinstance(parsed, dict):
        raise LLMInvalidJSONError("Validation output is not a JSON object")
    data = parsed
    is_valid = bool(data.get("isValid", data.get("is_valid", False)))
    reason = data.get("reason")
    if not isinstance(reason, str) or not reason.strip():
        reason = "Valid input." if is_valid else INVALID_INPUT_REASON
    return ValidationResult(is_valid=is_valid, reason=reason.strip())
