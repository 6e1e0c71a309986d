"""survey_rulesets — survey definition and response validation SDK.

Public API:
    PromptValidator  — validates one prompt's answer and records its slot
    SurveyDriver     — validates a whole response in declaration order
    SurveyStore      — loads YAML survey definitions into typed models
    ValidatedResponse — outcome of a successful driver pass

Collaborators (interfaces and default implementations):
    ConditionEvaluator    — PredicateEvaluator
    MediaStore            — InMemoryMediaStore, DirectoryMediaStore
    NestedSchemaValidator — JsonSchemaValidator

Errors:
    PromptDefinitionError, SurveyDefinitionError — invalid definitions
    ResponseValidationError, SurveyResponseError — rejected answers
"""

from survey_rulesets.driver import SurveyDriver, ValidatedResponse
from survey_rulesets.errors import (
    DefinitionError,
    ErrorKind,
    PromptDefinitionError,
    ResponseValidationError,
    SurveyDefinitionError,
    SurveyError,
    SurveyResponseError,
    ViolationKind,
)
from survey_rulesets.evaluator import PredicateEvaluator
from survey_rulesets.interfaces import ConditionEvaluator, MediaStore, NestedSchemaValidator
from survey_rulesets.media import DirectoryMediaStore, InMemoryMediaStore
from survey_rulesets.nested_schema import JsonSchemaValidator
from survey_rulesets.store import SurveyStore
from survey_rulesets.validator import PromptValidator

__all__ = [
    # Engine & store
    "PromptValidator",
    "SurveyDriver",
    "SurveyStore",
    "ValidatedResponse",
    # Collaborators
    "ConditionEvaluator",
    "MediaStore",
    "NestedSchemaValidator",
    "PredicateEvaluator",
    "InMemoryMediaStore",
    "DirectoryMediaStore",
    "JsonSchemaValidator",
    # Errors
    "SurveyError",
    "DefinitionError",
    "PromptDefinitionError",
    "SurveyDefinitionError",
    "ResponseValidationError",
    "SurveyResponseError",
    "ErrorKind",
    "ViolationKind",
]
