"""Exceptions raised by the survey engine.

Two categories never mix:

  Definition errors (raised while a survey definition is built):
    - PromptDefinitionError: one prompt definition is invalid
    - SurveyDefinitionError: the survey as a whole is invalid

  Response errors (raised while an uploaded response is validated):
    - ResponseValidationError: one prompt rejected its answer
    - SurveyResponseError: several prompts rejected their answers

Every class derives from ``ValueError`` so callers that only care about
"bad input" can catch that, which is what the server's global handlers do.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Why a prompt rejected an answer."""

    UNEXPECTED_ANSWER = "unexpected_answer"
    REQUIRED_ANSWER_MISSING = "required_answer_missing"
    WRONG_ANSWER_TYPE = "wrong_answer_type"
    CONSTRAINT_VIOLATION = "constraint_violation"
    MEDIA_NOT_FOUND = "media_not_found"


class ViolationKind(str, Enum):
    """Which declared rule a well-typed answer broke."""

    OUT_OF_RANGE = "out_of_range"
    NOT_WHOLE_NUMBER = "not_whole_number"
    WRONG_LENGTH = "wrong_length"
    UNKNOWN_CHOICE_VALUE = "unknown_choice_value"
    TOO_FEW_CHOICES = "too_few_choices"
    TOO_MANY_CHOICES = "too_many_choices"
    SCHEMA_CONFORMANCE = "schema_conformance"
    MEDIA_LIMIT_EXCEEDED = "media_limit_exceeded"


class SurveyError(ValueError):
    """Base class for every error raised by the engine."""


# ---------------------------------------------------------------------------
# Definition errors
# ---------------------------------------------------------------------------

class DefinitionError(SurveyError):
    """A survey definition is malformed and must not be used."""


class PromptDefinitionError(DefinitionError):
    """A single prompt definition is invalid."""

    def __init__(self, prompt_id: str | None, message: str) -> None:
        self.prompt_id = prompt_id
        self.message = message
        where = prompt_id if prompt_id is not None else "<unknown prompt>"
        super().__init__(f"{message}: {where}")


class SurveyDefinitionError(DefinitionError):
    """A survey definition is invalid as a whole (ids, ordering, file)."""

    def __init__(self, survey_id: str | None, message: str) -> None:
        self.survey_id = survey_id
        self.message = message
        where = survey_id if survey_id is not None else "<unknown survey>"
        super().__init__(f"{message}: {where}")


# ---------------------------------------------------------------------------
# Response errors
# ---------------------------------------------------------------------------

class ResponseValidationError(SurveyError):
    """A prompt rejected the answer it was given.

    Attributes:
        prompt_id: id of the prompt that rejected the answer
        kind: the failure category
        violation: the broken rule, only for ``CONSTRAINT_VIOLATION``
        message: human-readable description without the prompt id
    """

    def __init__(
        self,
        prompt_id: str,
        kind: ErrorKind,
        message: str,
        violation: ViolationKind | None = None,
    ) -> None:
        self.prompt_id = prompt_id
        self.kind = kind
        self.violation = violation
        self.message = message
        super().__init__(f"{message}: {prompt_id}")

    def to_dict(self) -> dict:
        """Flat representation used in API error payloads."""
        return {
            "prompt_id": self.prompt_id,
            "kind": self.kind.value,
            "violation": self.violation.value if self.violation else None,
            "message": self.message,
        }


class SurveyResponseError(SurveyError):
    """One or more prompts of a survey rejected their answers."""

    def __init__(
        self, survey_id: str, errors: list[ResponseValidationError]
    ) -> None:
        self.survey_id = survey_id
        self.errors = list(errors)
        super().__init__(
            f"{len(self.errors)} invalid response(s) for survey {survey_id}"
        )
