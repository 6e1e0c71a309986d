"""Public model re-exports for survey_rulesets.

Consumers should import from ``survey_rulesets.models`` rather than
reaching into sub-modules directly.
"""

# --- Answer slots ---
from survey_rulesets.models.answer import (
    NOT_DISPLAYED,
    SKIPPED,
    Answered,
    AnswerMap,
    AnswerSlot,
    NoResponse,
    NotDisplayed,
    Skipped,
    answered_values,
    is_answered,
)

# --- Choices / conditions / media ---
from survey_rulesets.models.choice import Choice, NumberChoice, StringChoice
from survey_rulesets.models.condition import Condition, Predicate
from survey_rulesets.models.media import MediaBlob

# --- Prompts ---
from survey_rulesets.models.prompt import (
    AudioPrompt,
    BasePrompt,
    ChoicePrompt,
    DisplayType,
    ImagePrompt,
    MediaPrompt,
    MultiChoicePrompt,
    NumberMultiChoicePrompt,
    NumberPrompt,
    NumberSingleChoicePrompt,
    Prompt,
    RemoteActivityPrompt,
    SingleChoicePrompt,
    StringMultiChoicePrompt,
    StringSingleChoicePrompt,
    TextPrompt,
    TimestampPrompt,
    VideoPrompt,
    build_prompt,
    prompt_mapper,
)

# --- Schema / survey ---
from survey_rulesets.models.schema import ResponseSchema
from survey_rulesets.models.survey import Survey, build_survey

__all__ = [
    # Answer slots
    "NOT_DISPLAYED",
    "SKIPPED",
    "Answered",
    "AnswerMap",
    "AnswerSlot",
    "NoResponse",
    "NotDisplayed",
    "Skipped",
    "answered_values",
    "is_answered",
    # Choices / conditions / media
    "Choice",
    "NumberChoice",
    "StringChoice",
    "Condition",
    "Predicate",
    "MediaBlob",
    # Prompts
    "AudioPrompt",
    "BasePrompt",
    "ChoicePrompt",
    "DisplayType",
    "ImagePrompt",
    "MediaPrompt",
    "MultiChoicePrompt",
    "NumberMultiChoicePrompt",
    "NumberPrompt",
    "NumberSingleChoicePrompt",
    "Prompt",
    "RemoteActivityPrompt",
    "SingleChoicePrompt",
    "StringMultiChoicePrompt",
    "StringSingleChoicePrompt",
    "TextPrompt",
    "TimestampPrompt",
    "VideoPrompt",
    "build_prompt",
    "prompt_mapper",
    # Schema / survey
    "ResponseSchema",
    "Survey",
    "build_survey",
]
