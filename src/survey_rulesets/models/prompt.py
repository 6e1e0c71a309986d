"""Prompt type models for survey definitions.

Each prompt type maps to a specific answer shape and constraint set:

  Scalar prompts:
    - text: free text with optional length bounds
    - number: exact decimal with optional inclusive bounds / whole-only flag
    - timestamp: an ISO 8601 date-time, no further checks

  Choice prompts (answers must be declared values unless ``allow_custom``):
    - number_single_choice / string_single_choice: one value
    - number_multi_choice / string_multi_choice: a set of values

  Media prompts (answers are media reference ids, defaults forbidden):
    - audio, image, video

  Nested-schema prompts:
    - remote_activity: an arbitrary JSON value checked against an embedded
      JSON Schema

The discriminated ``Prompt`` union uses ``prompt_type`` as its discriminator.
The ``prompt_mapper`` dict maps type strings to their Pydantic classes and
``build_prompt`` turns one raw definition into a prompt, reporting problems
as ``PromptDefinitionError``.

Prompts are frozen: built once when a survey is loaded, then shared
read-only by every validation pass.
"""

from __future__ import annotations

from datetime import datetime
from decimal import ROUND_DOWN, Decimal
from enum import Enum
from typing import Any, Annotated, ClassVar, List, Literal, Mapping, Optional, Union
from urllib.parse import urlparse

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    PositiveInt,
    PrivateAttr,
    ValidationError,
    field_validator,
    model_validator,
)

from survey_rulesets.constants import DEFAULT_ALLOW_CUSTOM, DISPLAY_TYPES_BY_PROMPT
from survey_rulesets.errors import PromptDefinitionError
from survey_rulesets.models.choice import Choice, NumberChoice, StringChoice
from survey_rulesets.models.condition import Condition
from survey_rulesets.models.schema import ResponseSchema


class DisplayType(str, Enum):
    """How a client renders a prompt."""

    CALENDAR = "calendar"
    CAMERA = "camera"
    LAUNCHER = "launcher"
    LIST = "list"
    PICKER = "picker"
    RECORDER = "recorder"
    SLIDER = "slider"
    TEXTBOX = "textbox"


def is_whole_number(value: Decimal) -> bool:
    """True if truncating ``value`` to zero decimal places leaves it unchanged."""
    return value.to_integral_value(rounding=ROUND_DOWN) == value


# --- Base prompt type ---

class BasePrompt(BaseModel):
    """Fields shared by all prompt types."""

    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    condition: Optional[Condition] = None
    display_type: DisplayType
    display_label: Optional[str] = None
    skippable: bool = False
    skip_label: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _fill_display_type(cls, data: Any) -> Any:
        # Omitted display_type → the prompt type's default
        if isinstance(data, dict) and data.get("display_type") is None:
            field = cls.model_fields.get("prompt_type")
            allowed = DISPLAY_TYPES_BY_PROMPT.get(field.default) if field else None
            if allowed:
                data = {**data, "display_type": allowed[0]}
        return data

    @field_validator("id", "text")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    @model_validator(mode="after")
    def _chk_display_type(self):
        allowed = DISPLAY_TYPES_BY_PROMPT[self.prompt_type]
        if self.display_type.value not in allowed:
            raise ValueError(
                f"display_type '{self.display_type.value}' is not valid for "
                f"{self.prompt_type} prompts; expected one of {list(allowed)}"
            )
        return self

    @property
    def is_optional(self) -> bool:
        """True if a valid response may lack an answer for this prompt."""
        return self.skippable or self.condition is not None

    def response_schema(self) -> ResponseSchema:
        """Describe the shape of a valid answer.

        Every concrete prompt type in ``prompt_mapper`` overrides this;
        ``BasePrompt`` itself is never built from a definition.
        """
        raise NotImplementedError(f"{type(self).__name__} does not define a response schema")

    def _scalar_schema(self, kind) -> ResponseSchema:
        return ResponseSchema(
            kind=kind, name=self.id, doc=self.text, optional=self.is_optional
        )


# --- Scalar prompt types ---

class TextPrompt(BasePrompt):
    """Free text with optional inclusive length bounds."""

    prompt_type: Literal["text"] = "text"
    min_length: Optional[NonNegativeInt] = None
    max_length: Optional[NonNegativeInt] = None
    default_response: Optional[str] = None

    @model_validator(mode="after")
    def _chk(self):
        if (
            self.min_length is not None
            and self.max_length is not None
            and self.min_length > self.max_length
        ):
            raise ValueError("min_length must be <= max_length")
        if self.default_response is not None and not self.length_ok(self.default_response):
            raise ValueError("default_response violates the length bounds")
        return self

    def length_ok(self, value: str) -> bool:
        if self.min_length is not None and len(value) < self.min_length:
            return False
        if self.max_length is not None and len(value) > self.max_length:
            return False
        return True

    def response_schema(self) -> ResponseSchema:
        return self._scalar_schema("string")


class NumberPrompt(BasePrompt):
    """Exact decimal with optional inclusive min/max and a whole-number flag."""

    prompt_type: Literal["number"] = "number"
    min_value: Optional[Decimal] = None
    max_value: Optional[Decimal] = None
    whole_numbers_only: bool = False
    default_response: Optional[Decimal] = None

    @model_validator(mode="after")
    def _chk(self):
        if (
            self.min_value is not None
            and self.max_value is not None
            and self.min_value > self.max_value
        ):
            raise ValueError("min_value must be <= max_value")
        default = self.default_response
        if default is not None:
            if not self.in_range(default):
                raise ValueError("default_response is outside [min_value, max_value]")
            if self.whole_numbers_only and not is_whole_number(default):
                raise ValueError("default_response must be a whole number")
        return self

    def in_range(self, value: Decimal) -> bool:
        if self.min_value is not None and value < self.min_value:
            return False
        if self.max_value is not None and value > self.max_value:
            return False
        return True

    def response_schema(self) -> ResponseSchema:
        return self._scalar_schema("number")


class TimestampPrompt(BasePrompt):
    """A date-time answer; any parseable instant is accepted."""

    prompt_type: Literal["timestamp"] = "timestamp"
    default_response: Optional[datetime] = None

    def response_schema(self) -> ResponseSchema:
        return self._scalar_schema("timestamp")


# --- Choice prompt types ---

class ChoicePrompt(BasePrompt):
    """Fields and lookups shared by every choice prompt.

    ``choices`` keeps the declaration order for display; ``get_choice``
    looks choices up by value.
    """

    multiple: ClassVar[bool] = False

    choices: List[Choice]
    allow_custom: bool = DEFAULT_ALLOW_CUSTOM

    _by_value: dict = PrivateAttr(default_factory=dict)

    @model_validator(mode="after")
    def _index_choices(self):
        if not self.choices:
            raise ValueError("at least one choice is required")
        by_value: dict = {}
        labels: set[str] = set()
        for choice in self.choices:
            if choice.value in by_value:
                raise ValueError(f"two choices have the same value '{choice.value}'")
            if choice.label is not None:
                if choice.label in labels:
                    raise ValueError(f"two choices have the same label '{choice.label}'")
                labels.add(choice.label)
            by_value[choice.value] = choice
        self._by_value = by_value

        if not self.allow_custom:
            for value in self.default_values():
                if value not in by_value:
                    raise ValueError(f"the default response '{value}' is unknown")
        return self

    def default_values(self) -> list:
        """Default response as a list of values (empty when unset)."""
        return []

    def get_choice(self, value: Any) -> Choice | None:
        return self._by_value.get(value)

    def has_value(self, value: Any) -> bool:
        return value in self._by_value

    @property
    def declared_values(self) -> list:
        """Declared values in declaration order."""
        return [c.value for c in self.choices]

    def _value_kind(self) -> str:
        return "number" if self.prompt_type.startswith("number_") else "string"

    def response_schema(self) -> ResponseSchema:
        if self.multiple:
            return ResponseSchema(
                kind="array",
                name=self.id,
                doc=self.text,
                optional=self.is_optional,
                items=ResponseSchema(kind=self._value_kind()),
            )
        return self._scalar_schema(self._value_kind())


class SingleChoicePrompt(ChoicePrompt):
    """Pick one value."""

    def default_values(self) -> list:
        default = getattr(self, "default_response", None)
        return [] if default is None else [default]


class MultiChoicePrompt(ChoicePrompt):
    """Pick a set of values, optionally bounded in size."""

    multiple: ClassVar[bool] = True

    min_choices: Optional[NonNegativeInt] = None
    max_choices: Optional[NonNegativeInt] = None

    @model_validator(mode="after")
    def _chk_bounds(self):
        if (
            self.min_choices is not None
            and self.max_choices is not None
            and self.min_choices > self.max_choices
        ):
            raise ValueError("min_choices must be <= max_choices")
        return self

    def default_values(self) -> list:
        return list(getattr(self, "default_response", None) or [])


class NumberSingleChoicePrompt(SingleChoicePrompt):
    prompt_type: Literal["number_single_choice"] = "number_single_choice"
    choices: List[NumberChoice]
    default_response: Optional[Decimal] = None


class StringSingleChoicePrompt(SingleChoicePrompt):
    prompt_type: Literal["string_single_choice"] = "string_single_choice"
    choices: List[StringChoice]
    default_response: Optional[str] = None


class NumberMultiChoicePrompt(MultiChoicePrompt):
    prompt_type: Literal["number_multi_choice"] = "number_multi_choice"
    choices: List[NumberChoice]
    default_response: Optional[List[Decimal]] = None


class StringMultiChoicePrompt(MultiChoicePrompt):
    prompt_type: Literal["string_multi_choice"] = "string_multi_choice"
    choices: List[StringChoice]
    default_response: Optional[List[str]] = None


# --- Media prompt types ---

class MediaPrompt(BasePrompt):
    """Answer is the id of a media item uploaded alongside the response."""

    default_response: Optional[str] = None

    @model_validator(mode="after")
    def _no_default(self):
        if self.default_response is not None:
            raise ValueError("default responses are not allowed for media prompts")
        return self

    def response_schema(self) -> ResponseSchema:
        return self._scalar_schema("string")


class AudioPrompt(MediaPrompt):
    prompt_type: Literal["audio"] = "audio"
    max_duration_ms: Optional[PositiveInt] = None


class ImagePrompt(MediaPrompt):
    prompt_type: Literal["image"] = "image"
    # Longest allowed side, in pixels
    max_dimension: Optional[PositiveInt] = None


class VideoPrompt(MediaPrompt):
    prompt_type: Literal["video"] = "video"
    max_duration_ms: Optional[PositiveInt] = None


# --- Nested-schema prompt type ---

class RemoteActivityPrompt(BasePrompt):
    """Launches an external activity whose JSON result is schema-checked."""

    prompt_type: Literal["remote_activity"] = "remote_activity"
    uri: str
    activity_schema: dict[str, Any]
    default_response: Optional[Any] = None

    @field_validator("uri")
    @classmethod
    def _chk_uri(cls, v: str) -> str:
        if not urlparse(v).scheme:
            raise ValueError(f"uri '{v}' has no scheme")
        return v

    @model_validator(mode="after")
    def _chk(self):
        if self.default_response is not None:
            raise ValueError("default responses are not allowed for remote activities")
        try:
            Draft202012Validator.check_schema(self.activity_schema)
        except SchemaError as exc:
            raise ValueError(f"activity_schema is not a valid JSON Schema: {exc.message}")
        return self

    def response_schema(self) -> ResponseSchema:
        embedded = ResponseSchema.from_json_schema(self.activity_schema)
        return embedded.rescoped(
            name=self.id,
            doc=embedded.doc or self.text,
            optional=self.is_optional,
        )


# --- Discriminated union of all prompt types ---

Prompt = Annotated[
    Union[
        TextPrompt,
        NumberPrompt,
        TimestampPrompt,
        NumberSingleChoicePrompt,
        StringSingleChoicePrompt,
        NumberMultiChoicePrompt,
        StringMultiChoicePrompt,
        AudioPrompt,
        ImagePrompt,
        VideoPrompt,
        RemoteActivityPrompt,
    ],
    Field(discriminator="prompt_type"),
]

# Maps prompt_type string → Pydantic class for building from raw definitions.
prompt_mapper: dict[str, type[BasePrompt]] = {
    "text": TextPrompt,
    "number": NumberPrompt,
    "timestamp": TimestampPrompt,
    "number_single_choice": NumberSingleChoicePrompt,
    "string_single_choice": StringSingleChoicePrompt,
    "number_multi_choice": NumberMultiChoicePrompt,
    "string_multi_choice": StringMultiChoicePrompt,
    "audio": AudioPrompt,
    "image": ImagePrompt,
    "video": VideoPrompt,
    "remote_activity": RemoteActivityPrompt,
}


def describe_validation_error(exc: ValidationError) -> str:
    """Flatten a pydantic ValidationError into one readable line."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"])
        msg = err["msg"].removeprefix("Value error, ")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts)


def build_prompt(definition: Mapping[str, Any]) -> BasePrompt:
    """Build one prompt from a raw definition mapping.

    Raises:
        PromptDefinitionError: if the type is unknown or any field is invalid.
    """
    prompt_id = definition.get("id")
    prompt_type = definition.get("prompt_type")
    cls = prompt_mapper.get(prompt_type)
    if cls is None:
        raise PromptDefinitionError(prompt_id, f"Unknown prompt_type '{prompt_type}'")
    try:
        return cls(**definition)
    except ValidationError as exc:
        raise PromptDefinitionError(prompt_id, describe_validation_error(exc)) from exc
