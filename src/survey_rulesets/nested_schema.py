"""JsonSchemaValidator — nested-schema conformance via ``jsonschema``.

Remote-activity prompts embed a JSON Schema (draft 2020-12) describing the
result the activity returns.  The schema is meta-validated when the prompt
is built and answers are checked against it at validation time.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from jsonschema import Draft202012Validator
from jsonschema.exceptions import best_match

from survey_rulesets.interfaces import NestedSchemaValidator

logger = logging.getLogger(__name__)


class JsonSchemaValidator(NestedSchemaValidator):
    """Validates values with ``jsonschema.Draft202012Validator``."""

    def validate(self, schema: Mapping[str, Any], value: Any) -> str | None:
        """Return the most relevant conformance error, or None.

        ``best_match`` picks the error deepest in the instance, which is
        usually the one a survey author wants to see.
        """
        error = best_match(Draft202012Validator(schema).iter_errors(value))
        if error is None:
            return None
        path = "/".join(str(p) for p in error.absolute_path)
        logger.debug("Schema conformance failed at '%s': %s", path, error.message)
        if path:
            return f"{error.message} (at '{path}')"
        return error.message
