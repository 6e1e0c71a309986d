"""Prompt definition tests — construction-time checks for every prompt type.

A prompt that violates its own declaration must never be built, so every
check here goes through ``build_prompt`` and expects a
``PromptDefinitionError`` carrying the prompt id.
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from survey_rulesets.errors import PromptDefinitionError
from survey_rulesets.models.prompt import (
    DisplayType,
    NumberMultiChoicePrompt,
    NumberPrompt,
    NumberSingleChoicePrompt,
    RemoteActivityPrompt,
    StringSingleChoicePrompt,
    TextPrompt,
    VideoPrompt,
    build_prompt,
    is_whole_number,
)


def _choices(*values):
    return [{"label": str(v).title(), "value": v} for v in values]


# =====================================================================
# Dispatch and shared fields
# =====================================================================


class TestBuildPrompt:
    """build_prompt dispatches on prompt_type and wraps pydantic errors."""

    def test_dispatches_on_prompt_type(self):
        p = build_prompt({"id": "q1", "prompt_type": "number", "text": "Age?"})
        assert isinstance(p, NumberPrompt)

    def test_unknown_type(self):
        with pytest.raises(PromptDefinitionError) as exc_info:
            build_prompt({"id": "q1", "prompt_type": "slider", "text": "?"})
        assert exc_info.value.prompt_id == "q1"
        assert "Unknown prompt_type" in str(exc_info.value)

    def test_error_message_ends_with_prompt_id(self):
        with pytest.raises(PromptDefinitionError) as exc_info:
            build_prompt({"id": "q7", "prompt_type": "text", "text": "   "})
        assert str(exc_info.value).endswith(": q7")

    def test_blank_id_rejected(self):
        with pytest.raises(PromptDefinitionError):
            build_prompt({"id": " ", "prompt_type": "text", "text": "Name?"})

    def test_default_display_type(self):
        """Omitted display_type falls back to the type's first allowed value."""
        assert build_prompt({"id": "a", "prompt_type": "text", "text": "?"}).display_type == DisplayType.TEXTBOX
        assert build_prompt({"id": "b", "prompt_type": "timestamp", "text": "?"}).display_type == DisplayType.CALENDAR
        assert build_prompt({"id": "c", "prompt_type": "image", "text": "?"}).display_type == DisplayType.CAMERA

    def test_display_type_must_fit_prompt_type(self):
        with pytest.raises(PromptDefinitionError, match="display_type"):
            build_prompt({"id": "q1", "prompt_type": "text", "text": "?", "display_type": "slider"})

    def test_optional_when_skippable_or_conditional(self):
        plain = TextPrompt(id="a", text="?")
        skippable = TextPrompt(id="b", text="?", skippable=True)
        conditional = TextPrompt(
            id="c", text="?", condition={"when": [{"qid": "a", "op": "answered"}]}
        )
        assert plain.is_optional is False
        assert skippable.is_optional is True
        assert conditional.is_optional is True

    def test_prompts_are_frozen(self):
        p = TextPrompt(id="a", text="?")
        with pytest.raises(ValidationError):
            p.text = "changed"


# =====================================================================
# Scalar prompts
# =====================================================================


class TestTextPromptDefinition:

    def test_min_above_max(self):
        with pytest.raises(PromptDefinitionError, match="min_length"):
            build_prompt({"id": "t", "prompt_type": "text", "text": "?", "min_length": 5, "max_length": 2})

    def test_default_must_respect_length(self):
        with pytest.raises(PromptDefinitionError, match="default_response"):
            build_prompt({
                "id": "t", "prompt_type": "text", "text": "?",
                "max_length": 3, "default_response": "too long",
            })

    def test_negative_length_rejected(self):
        with pytest.raises(PromptDefinitionError):
            build_prompt({"id": "t", "prompt_type": "text", "text": "?", "min_length": -1})


class TestNumberPromptDefinition:

    def test_bounds_are_decimals(self):
        p = build_prompt({"id": "n", "prompt_type": "number", "text": "?", "min_value": 0, "max_value": "2.5"})
        assert p.min_value == Decimal("0")
        assert p.max_value == Decimal("2.5")

    def test_min_above_max(self):
        with pytest.raises(PromptDefinitionError, match="min_value"):
            build_prompt({"id": "n", "prompt_type": "number", "text": "?", "min_value": 10, "max_value": 1})

    def test_default_out_of_range(self):
        with pytest.raises(PromptDefinitionError, match="outside"):
            build_prompt({
                "id": "n", "prompt_type": "number", "text": "?",
                "min_value": 0, "max_value": 10, "default_response": 11,
            })

    def test_default_must_be_whole(self):
        with pytest.raises(PromptDefinitionError, match="whole"):
            build_prompt({
                "id": "n", "prompt_type": "number", "text": "?",
                "whole_numbers_only": True, "default_response": "1.5",
            })

    def test_is_whole_number(self):
        assert is_whole_number(Decimal("3"))
        assert is_whole_number(Decimal("3.000"))
        assert is_whole_number(Decimal("-4"))
        assert not is_whole_number(Decimal("3.01"))
        assert not is_whole_number(Decimal("-0.5"))


# =====================================================================
# Choice prompts
# =====================================================================


class TestChoicePromptDefinition:
    """Choice value/label uniqueness and default checks."""

    def test_number_choices_are_decimals(self):
        p = build_prompt({
            "id": "c", "prompt_type": "number_single_choice", "text": "?",
            "choices": _choices(1, 2, 3),
        })
        assert isinstance(p, NumberSingleChoicePrompt)
        assert p.declared_values == [Decimal(1), Decimal(2), Decimal(3)]
        assert p.has_value(Decimal("2"))
        assert p.get_choice(Decimal("3")).label == "3"

    def test_empty_choices(self):
        with pytest.raises(PromptDefinitionError, match="at least one choice"):
            build_prompt({"id": "c", "prompt_type": "string_single_choice", "text": "?", "choices": []})

    def test_empty_choices_even_with_allow_custom(self):
        with pytest.raises(PromptDefinitionError):
            build_prompt({
                "id": "c", "prompt_type": "string_single_choice", "text": "?",
                "choices": [], "allow_custom": True,
            })

    def test_duplicate_value(self):
        with pytest.raises(PromptDefinitionError, match="same value"):
            build_prompt({
                "id": "c", "prompt_type": "string_single_choice", "text": "?",
                "choices": [{"label": "A", "value": "a"}, {"label": "B", "value": "a"}],
            })

    def test_duplicate_number_value_in_different_notation(self):
        """1 and 1.0 are the same decimal value."""
        with pytest.raises(PromptDefinitionError, match="same value"):
            build_prompt({
                "id": "c", "prompt_type": "number_single_choice", "text": "?",
                "choices": [{"value": 1}, {"value": "1.0"}],
            })

    def test_duplicate_label(self):
        with pytest.raises(PromptDefinitionError, match="same label"):
            build_prompt({
                "id": "c", "prompt_type": "string_single_choice", "text": "?",
                "choices": [{"label": "Same", "value": "a"}, {"label": "Same", "value": "b"}],
            })

    def test_labels_are_optional(self):
        p = build_prompt({
            "id": "c", "prompt_type": "string_single_choice", "text": "?",
            "choices": [{"value": "a"}, {"value": "b"}],
        })
        assert isinstance(p, StringSingleChoicePrompt)
        assert p.get_choice("a").label is None

    def test_unknown_default(self):
        with pytest.raises(PromptDefinitionError, match="default response"):
            build_prompt({
                "id": "c", "prompt_type": "string_single_choice", "text": "?",
                "choices": _choices("a", "b"), "default_response": "z",
            })

    def test_unknown_default_with_allow_custom(self):
        p = build_prompt({
            "id": "c", "prompt_type": "string_single_choice", "text": "?",
            "choices": _choices("a", "b"), "default_response": "z", "allow_custom": True,
        })
        assert p.default_response == "z"

    def test_multi_choice_unknown_default(self):
        with pytest.raises(PromptDefinitionError, match="default response"):
            build_prompt({
                "id": "c", "prompt_type": "number_multi_choice", "text": "?",
                "choices": _choices(1, 2), "default_response": [1, 5],
            })

    def test_multi_choice_bounds(self):
        p = build_prompt({
            "id": "c", "prompt_type": "number_multi_choice", "text": "?",
            "choices": _choices(1, 2, 3), "min_choices": 1, "max_choices": 2,
        })
        assert isinstance(p, NumberMultiChoicePrompt)
        with pytest.raises(PromptDefinitionError, match="min_choices"):
            build_prompt({
                "id": "c", "prompt_type": "number_multi_choice", "text": "?",
                "choices": _choices(1, 2, 3), "min_choices": 3, "max_choices": 1,
            })


# =====================================================================
# Media and remote-activity prompts
# =====================================================================


class TestMediaPromptDefinition:

    @pytest.mark.parametrize("prompt_type", ["audio", "image", "video"])
    def test_default_forbidden(self, prompt_type):
        with pytest.raises(PromptDefinitionError, match="not allowed"):
            build_prompt({"id": "m", "prompt_type": prompt_type, "text": "?", "default_response": "x"})

    def test_video_display_types(self):
        p = build_prompt({"id": "m", "prompt_type": "video", "text": "?", "display_type": "recorder"})
        assert isinstance(p, VideoPrompt)
        assert p.display_type == DisplayType.RECORDER

    def test_limits_must_be_positive(self):
        with pytest.raises(PromptDefinitionError):
            build_prompt({"id": "m", "prompt_type": "image", "text": "?", "max_dimension": 0})


class TestRemoteActivityDefinition:

    def _definition(self, **overrides):
        d = {
            "id": "task",
            "prompt_type": "remote_activity",
            "text": "Do the task",
            "uri": "https://example.org/task",
            "activity_schema": {"type": "object", "properties": {"score": {"type": "number"}}},
        }
        d.update(overrides)
        return d

    def test_builds(self):
        p = build_prompt(self._definition())
        assert isinstance(p, RemoteActivityPrompt)
        assert p.display_type == DisplayType.LAUNCHER

    def test_default_forbidden(self):
        with pytest.raises(PromptDefinitionError, match="not allowed"):
            build_prompt(self._definition(default_response={"score": 1}))

    def test_uri_needs_scheme(self):
        with pytest.raises(PromptDefinitionError, match="scheme"):
            build_prompt(self._definition(uri="example.org/task"))

    def test_invalid_embedded_schema(self):
        with pytest.raises(PromptDefinitionError, match="JSON Schema"):
            build_prompt(self._definition(activity_schema={"type": "banana"}))
