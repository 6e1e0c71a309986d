"""Condition models — visibility rules attached to prompts.

A condition is a list of predicates over the answers of *earlier* prompts.
``match: all`` (the default) requires every predicate to hold; ``match:
any`` requires at least one.

Operators:
  - eq, ne: equality / inequality (eq on a multi-choice answer tests
    membership)
  - lt, le, gt, ge: numeric comparisons
  - between: value is [min, max] inclusive
  - contains, not_contains: substring / element membership
  - contains_any, contains_all: set membership
  - matches: regex match
  - answered, skipped, not_displayed: test the slot status itself; these
    take no ``value``

Each predicate checks its ``value`` against its operator when it is built,
so a malformed condition fails with the survey definition rather than
during answer validation.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

PredicateOp = Literal[
    "eq", "ne", "contains", "not_contains", "matches",
    "contains_any", "contains_all",
    "lt", "le", "gt", "ge", "between",
    "answered", "skipped", "not_displayed",
]

# Operators that look at the slot status instead of the answer value.
STATUS_OPS: frozenset[str] = frozenset({"answered", "skipped", "not_displayed"})

# Operators whose value is a number (or a numeric string).
NUMERIC_OPS: frozenset[str] = frozenset({"lt", "le", "gt", "ge"})

# Operators whose value is a list of candidates.
LIST_OPS: frozenset[str] = frozenset({"contains_any", "contains_all"})


def _as_number(value: Any) -> Decimal | None:
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        return None
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        return None
    return number if number.is_finite() else None


class Predicate(BaseModel):
    """A single test against one earlier prompt's slot."""

    model_config = ConfigDict(frozen=True)

    qid: str
    field: Optional[str] = None
    op: PredicateOp
    value: Any = None

    @model_validator(mode="after")
    def _chk_value(self):
        op, value = self.op, self.value
        if op in STATUS_OPS:
            if value is not None:
                raise ValueError(f"operator '{op}' takes no value")
            return self
        if value is None:
            raise ValueError(f"operator '{op}' requires a value")

        if op == "between":
            if not isinstance(value, (list, tuple)) or len(value) != 2:
                raise ValueError("operator 'between' takes a [min, max] pair")
            lo, hi = _as_number(value[0]), _as_number(value[1])
            if lo is None or hi is None:
                raise ValueError("operator 'between' takes numeric bounds")
            if lo > hi:
                raise ValueError("operator 'between' needs min <= max")
        elif op in NUMERIC_OPS:
            if _as_number(value) is None:
                raise ValueError(f"operator '{op}' takes a number, got {value!r}")
        elif op in LIST_OPS:
            if not isinstance(value, (list, tuple)):
                raise ValueError(f"operator '{op}' takes a list of values")
        elif op == "matches":
            if not isinstance(value, str):
                raise ValueError("operator 'matches' takes a regular expression string")
            try:
                re.compile(value)
            except re.error as exc:
                raise ValueError(f"invalid regular expression '{value}': {exc}")
        return self


class Condition(BaseModel):
    """Visibility rule of a prompt."""

    model_config = ConfigDict(frozen=True)

    when: List[Predicate] = Field(min_length=1)
    match: Literal["all", "any"] = "all"

    @property
    def referenced_ids(self) -> list[str]:
        """Prompt ids this condition reads, in predicate order."""
        return [p.qid for p in self.when]
