"""Answer-slot models — what one prompt contributes to the running answer map.

Each prompt writes exactly one slot into the answer map during a
validation pass:

  - Answered: the prompt was shown and produced a validated value
  - NotDisplayed: the prompt's condition evaluated false
  - Skipped: the prompt was shown, is skippable, and got no answer

The ``AnswerSlot`` union uses ``status`` as its discriminator, so a
consumer can always tell a real answer from a sentinel without comparing
against special values.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field


class NoResponse(str, Enum):
    """The two reasons a prompt can end up without a real answer."""

    NOT_DISPLAYED = "not_displayed"
    SKIPPED = "skipped"


class Answered(BaseModel):
    """A validated answer value."""

    model_config = ConfigDict(frozen=True)

    status: Literal["answered"] = "answered"
    value: Any


class NotDisplayed(BaseModel):
    """The prompt's condition evaluated false, so it was never shown."""

    model_config = ConfigDict(frozen=True)

    status: Literal["not_displayed"] = "not_displayed"

    @property
    def reason(self) -> NoResponse:
        return NoResponse.NOT_DISPLAYED


class Skipped(BaseModel):
    """The prompt was shown and the user chose to skip it."""

    model_config = ConfigDict(frozen=True)

    status: Literal["skipped"] = "skipped"

    @property
    def reason(self) -> NoResponse:
        return NoResponse.SKIPPED


AnswerSlot = Annotated[
    Union[Answered, NotDisplayed, Skipped],
    Field(discriminator="status"),
]

# Running answer map for one validation pass, keyed by prompt id.
AnswerMap = dict[str, Union[Answered, NotDisplayed, Skipped]]

# Canonical sentinel slots; every NotDisplayed()/Skipped() compares equal
# to these, so callers may use either.
NOT_DISPLAYED = NotDisplayed()
SKIPPED = Skipped()


def is_answered(slot: Any) -> bool:
    """True if ``slot`` holds a real validated value."""
    return isinstance(slot, Answered)


def answered_values(answers: Mapping[str, Any]) -> dict[str, Any]:
    """Strip sentinel slots and unwrap the remaining answers.

    Returns a plain ``{prompt_id: value}`` dict in answer-map order.
    """
    return {
        pid: slot.value for pid, slot in answers.items() if isinstance(slot, Answered)
    }
