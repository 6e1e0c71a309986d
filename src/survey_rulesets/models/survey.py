"""Survey definition model — an ordered list of prompts.

Definition-time checks:
  - at least one prompt
  - prompt ids are unique within the survey
  - a prompt's condition may only reference prompts declared before it,
    which is what lets one in-order pass evaluate every condition
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from survey_rulesets.errors import SurveyDefinitionError
from survey_rulesets.models.prompt import (
    BasePrompt,
    Prompt,
    build_prompt,
    describe_validation_error,
)
from survey_rulesets.models.schema import ResponseSchema


class Survey(BaseModel):
    """A survey: identity plus prompts in declaration order."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: Optional[str] = None
    version: int = 1
    items: List[Prompt] = Field(min_length=1)

    @model_validator(mode="after")
    def _chk_items(self):
        seen: set[str] = set()
        for prompt in self.items:
            if prompt.id in seen:
                raise ValueError(f"two prompts have the same id '{prompt.id}'")
            if prompt.condition is not None:
                for qid in prompt.condition.referenced_ids:
                    if qid not in seen:
                        raise ValueError(
                            f"the condition of '{prompt.id}' references "
                            f"'{qid}', which is not an earlier prompt"
                        )
            seen.add(prompt.id)
        return self

    @property
    def prompt_ids(self) -> list[str]:
        return [p.id for p in self.items]

    def get_prompt(self, prompt_id: str) -> BasePrompt:
        """Look up a prompt by id.

        Raises:
            KeyError: if the survey has no such prompt.
        """
        for prompt in self.items:
            if prompt.id == prompt_id:
                return prompt
        raise KeyError(f"Prompt not found: {prompt_id}")

    def response_schema(self) -> list[ResponseSchema]:
        """Per-prompt response schemas in declaration order."""
        return [p.response_schema() for p in self.items]


def build_survey(definition: Mapping[str, Any]) -> Survey:
    """Build a survey from a raw definition mapping.

    Each prompt is built with :func:`build_prompt` first so that a bad
    prompt is reported with its own id.

    Raises:
        PromptDefinitionError: if one prompt definition is invalid.
        SurveyDefinitionError: if the survey as a whole is invalid.
    """
    survey_id = definition.get("id")
    raw_items = definition.get("items")
    if not isinstance(raw_items, list):
        raise SurveyDefinitionError(survey_id, "'items' must be a list of prompts")

    items = [build_prompt(raw) for raw in raw_items]
    try:
        return Survey(**{**definition, "items": items})
    except ValidationError as exc:
        raise SurveyDefinitionError(survey_id, describe_validation_error(exc)) from exc
