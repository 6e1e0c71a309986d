"""PredicateEvaluator — evaluates prompt visibility conditions.

The validator calls :meth:`evaluate` before looking at a prompt's answer.
Only slots written by earlier prompts are present in the answer map, so a
condition may reference nothing that follows its prompt.

Slot handling:
  - a referenced prompt with no slot, or whose slot is a sentinel
    (not displayed / skipped), fails every value operator
  - ``answered``, ``skipped`` and ``not_displayed`` test the slot status
"""

from __future__ import annotations

import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from survey_rulesets.interfaces import ConditionEvaluator
from survey_rulesets.models.answer import Answered, NotDisplayed, Skipped
from survey_rulesets.models.condition import STATUS_OPS, Condition, Predicate

logger = logging.getLogger(__name__)


def _to_decimal(value: Any) -> Decimal | None:
    """Coerce a number (or numeric string) to Decimal; None if impossible."""
    if isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


def _equals(answer: Any, literal: Any) -> bool:
    """Equality that reads numeric literals exactly against Decimal answers."""
    if (
        isinstance(answer, Decimal)
        and isinstance(literal, (int, float))
        and not isinstance(literal, bool)
    ):
        return answer == _to_decimal(literal)
    return answer == literal


def _member(literal: Any, collection: Any) -> bool:
    return any(_equals(item, literal) for item in collection)


class PredicateEvaluator(ConditionEvaluator):
    """Evaluates ``Condition`` predicates against an answer map."""

    def evaluate(self, condition: Condition, answers: Mapping[str, Any]) -> bool:
        """Combine predicate results with the condition's ``match`` mode."""
        results = (self._eval_predicate(pred, answers) for pred in condition.when)
        if condition.match == "any":
            return any(results)
        return all(results)

    # ------------------------------------------------------------------
    # Predicate evaluation
    # ------------------------------------------------------------------

    def _eval_predicate(self, pred: Predicate, answers: Mapping[str, Any]) -> bool:
        """Evaluate a single predicate against the answer map."""
        slot = answers.get(pred.qid)
        if slot is None:
            logger.debug("Predicate references %s, which has no slot", pred.qid)
            return False

        if pred.op in STATUS_OPS:
            return self._eval_status(pred.op, slot)

        if not isinstance(slot, Answered):
            return False
        answer = slot.value

        # Drill into object answers (remote-activity results)
        if pred.field is not None:
            if isinstance(answer, dict):
                answer = answer.get(pred.field)
            else:
                return False
            if answer is None:
                return False

        return self._compare(pred.op, answer, pred.value)

    @staticmethod
    def _eval_status(op: str, slot: Any) -> bool:
        if op == "answered":
            return isinstance(slot, Answered)
        if op == "skipped":
            return isinstance(slot, Skipped)
        return isinstance(slot, NotDisplayed)

    @staticmethod
    def _compare(op: str, answer: Any, value: Any) -> bool:
        """Apply an operator to an answer and an expected value.

        Numeric comparisons go through Decimal so that number-prompt answers
        compare exactly against condition literals.
        """
        if op in ("eq", "ne"):
            # A multi-choice answer "equals" a value it contains
            if isinstance(answer, (list, tuple, set, frozenset)):
                matched = _member(value, answer)
            else:
                matched = _equals(answer, value)
            return matched if op == "eq" else not matched

        # --- Numeric comparisons ---
        if op in ("lt", "le", "gt", "ge", "between"):
            ans_num = _to_decimal(answer)
            if ans_num is None:
                return False

            if op == "between":
                # value is expected to be [min, max]
                lo, hi = _to_decimal(value[0]), _to_decimal(value[1])
                if lo is None or hi is None:
                    return False
                return lo <= ans_num <= hi

            other = _to_decimal(value)
            if other is None:
                return False
            if op == "lt":
                return ans_num < other
            if op == "le":
                return ans_num <= other
            if op == "gt":
                return ans_num > other
            return ans_num >= other

        # --- Collection / string membership ---
        is_collection = isinstance(answer, (list, tuple, set, frozenset))

        if op == "contains":
            if is_collection:
                return _member(value, answer)
            return str(value) in str(answer)

        if op == "not_contains":
            if is_collection:
                return not _member(value, answer)
            return str(value) not in str(answer)

        if op == "contains_any":
            if is_collection:
                return any(_member(v, answer) for v in value)
            ans_str = str(answer)
            return any(str(v) in ans_str for v in value)

        if op == "contains_all":
            if is_collection:
                return all(_member(v, answer) for v in value)
            ans_str = str(answer)
            return all(str(v) in ans_str for v in value)

        if op == "matches":
            return bool(re.search(str(value), str(answer)))

        logger.warning("Unknown predicate operator: %s", op)
        return False
