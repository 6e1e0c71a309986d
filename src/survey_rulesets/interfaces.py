"""Abstract interfaces for the engine's collaborators.

The validator consumes three collaborators and ships a default for each
(``PredicateEvaluator``, ``InMemoryMediaStore`` / ``DirectoryMediaStore``,
``JsonSchemaValidator``).  Deployments may plug in their own.

Typical wiring::

    validator = PromptValidator(
        evaluator=PredicateEvaluator(),
        media_store=DirectoryMediaStore("/var/lib/surveys/media"),
        schema_validator=JsonSchemaValidator(),
    )
    driver = SurveyDriver(validator)
    result = driver.validate_response(survey, responses)

All three are called synchronously from inside one validation pass and
must not keep state between calls.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping

from survey_rulesets.models.condition import Condition
from survey_rulesets.models.media import MediaBlob


class ConditionEvaluator(ABC):
    """Decides whether a prompt should have been displayed."""

    @abstractmethod
    def evaluate(self, condition: Condition, answers: Mapping[str, Any]) -> bool:
        """Evaluate ``condition`` against the answer map.

        Parameters
        ----------
        condition:
            The prompt's visibility condition.
        answers:
            Slots written so far in this pass, keyed by prompt id.  Only
            prompts preceding the one being validated are present.

        Returns
        -------
        bool
            True if the prompt should have been shown.
        """
        ...


class MediaStore(ABC):
    """Resolves media reference ids to stored blobs."""

    @abstractmethod
    def resolve(self, reference: str) -> MediaBlob | None:
        """Return the blob a reference points to, or None if unknown."""
        ...


class NestedSchemaValidator(ABC):
    """Checks arbitrary JSON-like values against an embedded schema."""

    @abstractmethod
    def validate(self, schema: Mapping[str, Any], value: Any) -> str | None:
        """Return a diagnostic message if ``value`` does not conform, else None."""
        ...
