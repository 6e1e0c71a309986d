"""Choice model for single/multi-choice prompts."""

from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict


class Choice(BaseModel):
    """A selectable option: optional display label plus a required value.

    Two choices of the same prompt must never share a value; the prompt
    enforces that when it is built.
    """

    model_config = ConfigDict(frozen=True)

    label: Optional[str] = None
    value: Union[Decimal, str]


class NumberChoice(Choice):
    """A choice whose value is a number (kept as an exact decimal)."""

    value: Decimal


class StringChoice(Choice):
    """A choice whose value is a string."""

    value: str
