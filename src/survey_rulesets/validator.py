"""PromptValidator — validates one prompt's raw answer against its definition.

Every prompt type goes through the same entry point, :meth:`validate`:

  1. Visibility: evaluate the prompt's condition against the answer map
     (no condition means always displayed).  A hidden prompt must not have
     an answer and records ``NOT_DISPLAYED``.
  2. Skipping: a displayed prompt without an answer records ``SKIPPED`` if
     it is skippable and fails otherwise.
  3. Conversion: the raw answer is converted to the prompt's response type;
     a shape mismatch fails with ``WRONG_ANSWER_TYPE``.
  4. Constraints: the type-specific check runs on the converted value.
  5. Bookkeeping: exactly one slot is written under the prompt's id.

Nothing is written to the answer map when validation fails, so the caller
sees either a new slot or an exception, never both.
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable

from survey_rulesets.constants import ENFORCE_MEDIA_LIMITS
from survey_rulesets.errors import ErrorKind, ResponseValidationError, ViolationKind
from survey_rulesets.evaluator import PredicateEvaluator
from survey_rulesets.interfaces import ConditionEvaluator, MediaStore, NestedSchemaValidator
from survey_rulesets.media import InMemoryMediaStore
from survey_rulesets.models.answer import NOT_DISPLAYED, SKIPPED, Answered, AnswerMap
from survey_rulesets.models.media import MediaBlob
from survey_rulesets.models.prompt import (
    AudioPrompt,
    BasePrompt,
    ChoicePrompt,
    ImagePrompt,
    MediaPrompt,
    MultiChoicePrompt,
    NumberPrompt,
    RemoteActivityPrompt,
    TextPrompt,
    VideoPrompt,
    is_whole_number,
)
from survey_rulesets.nested_schema import JsonSchemaValidator

logger = logging.getLogger(__name__)


class _WrongType(Exception):
    """Internal signal: the raw answer has the wrong shape."""


# ----------------------------------------------------------------------
# Raw answer conversion helpers
# ----------------------------------------------------------------------

def _as_text(raw: Any) -> str:
    if not isinstance(raw, str):
        raise _WrongType(f"expected a string, got {type(raw).__name__}")
    return raw


def _as_decimal(raw: Any) -> Decimal:
    # bool is a subclass of int in Python, so reject it explicitly
    if isinstance(raw, bool) or not isinstance(raw, (int, float, Decimal)):
        raise _WrongType(f"expected a number, got {type(raw).__name__}")
    try:
        value = raw if isinstance(raw, Decimal) else Decimal(str(raw))
    except InvalidOperation:
        raise _WrongType(f"'{raw}' is not a number")
    if not value.is_finite():
        raise _WrongType(f"'{raw}' is not a finite number")
    return value


def _as_timestamp(raw: Any) -> datetime:
    if isinstance(raw, datetime):
        return raw
    if not isinstance(raw, str):
        raise _WrongType(f"expected an ISO 8601 date-time, got {type(raw).__name__}")
    text = raw.strip()
    # fromisoformat only learned the "Z" suffix in 3.11
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise _WrongType(f"'{raw}' is not an ISO 8601 date-time")


def _as_unique_list(raw: Any, convert: Callable[[Any], Any]) -> list:
    """Convert a collection answer, dropping repeated values (set semantics)."""
    if isinstance(raw, (str, bytes, dict)) or not isinstance(raw, (list, tuple, set, frozenset)):
        raise _WrongType(f"expected a list of values, got {type(raw).__name__}")
    seen: list = []
    for item in raw:
        value = convert(item)
        if value not in seen:
            seen.append(value)
    return seen


def _is_json_like(raw: Any) -> bool:
    if raw is None or isinstance(raw, (str, bool, int, float, Decimal)):
        return True
    if isinstance(raw, (list, tuple)):
        return all(_is_json_like(item) for item in raw)
    if isinstance(raw, dict):
        return all(isinstance(k, str) and _is_json_like(v) for k, v in raw.items())
    return False


class PromptValidator:
    """Validates answers for every prompt type.

    Args:
        evaluator: decides prompt visibility (default: PredicateEvaluator)
        media_store: resolves media references (default: empty in-memory store)
        schema_validator: checks remote-activity results (default:
            JsonSchemaValidator)
        enforce_media_limits: whether the media hooks enforce
            ``max_dimension`` / ``max_duration_ms`` (default from the
            ENFORCE_MEDIA_LIMITS setting)
    """

    def __init__(
        self,
        evaluator: ConditionEvaluator | None = None,
        media_store: MediaStore | None = None,
        schema_validator: NestedSchemaValidator | None = None,
        *,
        enforce_media_limits: bool = ENFORCE_MEDIA_LIMITS,
    ) -> None:
        self._evaluator = evaluator or PredicateEvaluator()
        self._media = media_store if media_store is not None else InMemoryMediaStore()
        self._schemas = schema_validator or JsonSchemaValidator()
        self._enforce_media_limits = enforce_media_limits

    # ==================================================================
    # Entry point
    # ==================================================================

    def validate(self, prompt: BasePrompt, raw: Any, answers: AnswerMap):
        """Validate ``raw`` for ``prompt`` and record the outcome in ``answers``.

        Returns:
            The slot written under ``prompt.id``.

        Raises:
            ResponseValidationError: tagged with the prompt id; ``answers``
                is left unchanged.
        """
        slot = self._resolve_slot(prompt, raw, answers)
        answers[prompt.id] = slot
        logger.debug("Prompt %s → %s", prompt.id, slot.status)
        return slot

    def _resolve_slot(self, prompt: BasePrompt, raw: Any, answers: AnswerMap):
        displayed = prompt.condition is None or self._evaluator.evaluate(
            prompt.condition, answers
        )

        if not displayed:
            if raw is not None:
                raise self._fail(
                    prompt,
                    ErrorKind.UNEXPECTED_ANSWER,
                    "A prompt that should not have been displayed has a response",
                )
            return NOT_DISPLAYED

        if raw is None:
            if not prompt.skippable:
                raise self._fail(
                    prompt,
                    ErrorKind.REQUIRED_ANSWER_MISSING,
                    "A prompt that is not skippable was skipped",
                )
            return SKIPPED

        try:
            value = self._convert(prompt, raw)
        except _WrongType as exc:
            raise self._fail(
                prompt,
                ErrorKind.WRONG_ANSWER_TYPE,
                f"The response is of the wrong type ({exc})",
            )

        return Answered(value=self._check(prompt, value))

    # ==================================================================
    # Conversion: raw answer → typed value
    # ==================================================================

    def _convert(self, prompt: BasePrompt, raw: Any) -> Any:
        pt = prompt.prompt_type
        if pt == "text":
            return _as_text(raw)
        if pt == "number":
            return _as_decimal(raw)
        if pt == "timestamp":
            return _as_timestamp(raw)
        if pt == "number_single_choice":
            return _as_decimal(raw)
        if pt == "string_single_choice":
            return _as_text(raw)
        if pt == "number_multi_choice":
            return _as_unique_list(raw, _as_decimal)
        if pt == "string_multi_choice":
            return _as_unique_list(raw, _as_text)
        if pt in ("audio", "image", "video"):
            reference = _as_text(raw)
            if not reference.strip():
                raise _WrongType("the media reference is empty")
            return reference
        if pt == "remote_activity":
            if not _is_json_like(raw):
                raise _WrongType(f"{type(raw).__name__} is not a JSON value")
            return raw
        raise ValueError(f"Unsupported prompt_type: {pt}")

    # ==================================================================
    # Constraint checks: typed value → validated value
    # ==================================================================

    def _check(self, prompt: BasePrompt, value: Any) -> Any:
        if isinstance(prompt, TextPrompt):
            return self._check_text(prompt, value)
        if isinstance(prompt, NumberPrompt):
            return self._check_number(prompt, value)
        if isinstance(prompt, ChoicePrompt):
            return self._check_choice(prompt, value)
        if isinstance(prompt, MediaPrompt):
            return self._check_media(prompt, value)
        if isinstance(prompt, RemoteActivityPrompt):
            return self._check_remote_activity(prompt, value)
        # timestamp: no checks beyond parsing
        return value

    def _check_text(self, prompt: TextPrompt, value: str) -> str:
        if not prompt.length_ok(value):
            raise self._violation(
                prompt,
                ViolationKind.WRONG_LENGTH,
                f"The response length {len(value)} is outside "
                f"[{prompt.min_length}, {prompt.max_length}]",
            )
        return value

    def _check_number(self, prompt: NumberPrompt, value: Decimal) -> Decimal:
        if prompt.min_value is not None and value < prompt.min_value:
            raise self._violation(
                prompt,
                ViolationKind.OUT_OF_RANGE,
                f"The response {value} is less than the allowed minimum {prompt.min_value}",
            )
        if prompt.max_value is not None and value > prompt.max_value:
            raise self._violation(
                prompt,
                ViolationKind.OUT_OF_RANGE,
                f"The response {value} is greater than the allowed maximum {prompt.max_value}",
            )
        if prompt.whole_numbers_only and not is_whole_number(value):
            raise self._violation(
                prompt,
                ViolationKind.NOT_WHOLE_NUMBER,
                f"The response {value} must be a whole number",
            )
        return value

    def _check_choice(self, prompt: ChoicePrompt, value: Any) -> Any:
        selected = value if isinstance(prompt, MultiChoicePrompt) else [value]

        if not prompt.allow_custom:
            for item in selected:
                if not prompt.has_value(item):
                    raise self._violation(
                        prompt,
                        ViolationKind.UNKNOWN_CHOICE_VALUE,
                        f"The response value '{item}' is unknown",
                    )

        if isinstance(prompt, MultiChoicePrompt):
            if prompt.min_choices is not None and len(value) < prompt.min_choices:
                raise self._violation(
                    prompt,
                    ViolationKind.TOO_FEW_CHOICES,
                    f"At least {prompt.min_choices} choices must be selected",
                )
            if prompt.max_choices is not None and len(value) > prompt.max_choices:
                raise self._violation(
                    prompt,
                    ViolationKind.TOO_MANY_CHOICES,
                    f"At most {prompt.max_choices} choices may be selected",
                )
        return value

    def _check_media(self, prompt: MediaPrompt, reference: str) -> str:
        blob = self._media.resolve(reference)
        if blob is None:
            raise self._fail(
                prompt,
                ErrorKind.MEDIA_NOT_FOUND,
                f"The media '{reference}' does not exist",
            )
        if isinstance(prompt, ImagePrompt):
            self._check_image(prompt, blob)
        elif isinstance(prompt, VideoPrompt):
            self._check_video(prompt, blob)
        elif isinstance(prompt, AudioPrompt):
            self._check_audio(prompt, blob)
        return blob.id

    def _check_image(self, prompt: ImagePrompt, blob: MediaBlob) -> None:
        if not self._enforce_media_limits or prompt.max_dimension is None:
            return
        for side, size in (("width", blob.width), ("height", blob.height)):
            if size is not None and size > prompt.max_dimension:
                raise self._violation(
                    prompt,
                    ViolationKind.MEDIA_LIMIT_EXCEEDED,
                    f"The image {side} {size} exceeds the max dimension "
                    f"{prompt.max_dimension}",
                )

    def _check_video(self, prompt: VideoPrompt, blob: MediaBlob) -> None:
        self._check_duration(prompt, blob, prompt.max_duration_ms)

    def _check_audio(self, prompt: AudioPrompt, blob: MediaBlob) -> None:
        self._check_duration(prompt, blob, prompt.max_duration_ms)

    def _check_duration(
        self, prompt: MediaPrompt, blob: MediaBlob, limit: int | None
    ) -> None:
        if not self._enforce_media_limits or limit is None or blob.duration_ms is None:
            return
        if blob.duration_ms > limit:
            raise self._violation(
                prompt,
                ViolationKind.MEDIA_LIMIT_EXCEEDED,
                f"The recording lasts {blob.duration_ms} ms, more than {limit} ms",
            )

    def _check_remote_activity(self, prompt: RemoteActivityPrompt, value: Any) -> Any:
        message = self._schemas.validate(prompt.activity_schema, value)
        if message is not None:
            raise self._violation(prompt, ViolationKind.SCHEMA_CONFORMANCE, message)
        return value

    # ==================================================================
    # Error helpers
    # ==================================================================

    @staticmethod
    def _fail(
        prompt: BasePrompt,
        kind: ErrorKind,
        message: str,
        violation: ViolationKind | None = None,
    ) -> ResponseValidationError:
        logger.warning("Rejected response for %s [%s]: %s", prompt.id, kind.value, message)
        return ResponseValidationError(prompt.id, kind, message, violation)

    def _violation(
        self, prompt: BasePrompt, violation: ViolationKind, message: str
    ) -> ResponseValidationError:
        return self._fail(prompt, ErrorKind.CONSTRAINT_VIOLATION, message, violation)
