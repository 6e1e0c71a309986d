"""SurveyDriver — validates a whole survey response in one ordered pass.

The driver owns the answer map: it creates a fresh map per response, feeds
the prompts their answers in declaration order, and decides what happens
when a prompt rejects its answer:

  - ``fail_fast=True`` (default): the first ResponseValidationError
    propagates unchanged
  - ``fail_fast=False``: every failure is collected and raised together as
    a SurveyResponseError.  A failed prompt leaves no slot, so conditions
    that reference it evaluate as if it had not been answered.

Responses for ids that are not prompts of the survey are rejected once all
prompts have been validated.

Usage::

    driver = SurveyDriver(PromptValidator(media_store=store))
    result = driver.validate_response(survey, {"mood": 3, "note": "ok"})
    result.values   # {"mood": Decimal("3"), "note": "ok"}
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import BaseModel

from survey_rulesets.errors import ErrorKind, ResponseValidationError, SurveyResponseError
from survey_rulesets.models.answer import AnswerMap, AnswerSlot, answered_values
from survey_rulesets.models.survey import Survey
from survey_rulesets.validator import PromptValidator

logger = logging.getLogger(__name__)


class ValidatedResponse(BaseModel):
    """Outcome of a successful pass: one slot per prompt, in order."""

    survey_id: str
    slots: dict[str, AnswerSlot]

    @property
    def values(self) -> dict[str, Any]:
        """Answered prompts only, unwrapped (sentinels removed)."""
        return answered_values(self.slots)

    def status_of(self, prompt_id: str) -> str:
        return self.slots[prompt_id].status


class SurveyDriver:
    """Runs the prompt validator over a survey's prompts in order.

    Args:
        validator: the :class:`PromptValidator` to apply to each prompt
    """

    def __init__(self, validator: PromptValidator | None = None) -> None:
        self._validator = validator or PromptValidator()

    def validate_response(
        self,
        survey: Survey,
        responses: Mapping[str, Any],
        *,
        fail_fast: bool = True,
    ) -> ValidatedResponse:
        """Validate every prompt's answer from ``responses``.

        Args:
            survey: the survey definition
            responses: raw answers keyed by prompt id; a missing key or a
                ``None`` value both mean "no answer"
            fail_fast: stop at the first failure instead of collecting

        Raises:
            ResponseValidationError: first failure when ``fail_fast``.
            SurveyResponseError: all failures when not ``fail_fast``.
        """
        answers: AnswerMap = {}
        errors: list[ResponseValidationError] = []

        for prompt in survey.items:
            try:
                self._validator.validate(prompt, responses.get(prompt.id), answers)
            except ResponseValidationError as exc:
                if fail_fast:
                    raise
                errors.append(exc)

        known = set(survey.prompt_ids)
        for extra in (pid for pid in responses if pid not in known):
            exc = ResponseValidationError(
                extra,
                ErrorKind.UNEXPECTED_ANSWER,
                "A response was given for a prompt that is not part of the survey",
            )
            if fail_fast:
                raise exc
            errors.append(exc)

        if errors:
            logger.info(
                "Survey %s response rejected with %d error(s)", survey.id, len(errors)
            )
            raise SurveyResponseError(survey.id, errors)

        logger.debug("Survey %s response validated (%d slots)", survey.id, len(answers))
        return ValidatedResponse(survey_id=survey.id, slots=answers)
