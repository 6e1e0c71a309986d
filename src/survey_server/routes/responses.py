"""Response validation endpoint.

The body carries raw answers keyed by prompt id.  A prompt that was not
answered may be omitted or sent as ``null``.  Media answers are reference
ids resolved through the server's media store.

Rejected responses never reach this handler's return statement; the
global handlers turn SDK errors into 422 responses.
"""

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel

from survey_rulesets.driver import SurveyDriver
from survey_rulesets.store import SurveyStore

from survey_server.config import ServerSettings
from survey_server.dependencies import get_driver, get_settings, get_store

router = APIRouter(tags=["responses"])


# ------------------------------------------------------------------
# Request models
# ------------------------------------------------------------------

class ValidateResponseRequest(BaseModel):
    """Body for POST /surveys/{survey_id}/responses/validate.

    ``fail_fast`` overrides the server default: ``true`` reports only the
    first rejected answer, ``false`` reports all of them.
    """
    responses: dict[str, Any]
    fail_fast: bool | None = None


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.post("/surveys/{survey_id}/responses/validate")
def validate_response(
    survey_id: str,
    body: ValidateResponseRequest,
    store: SurveyStore = Depends(get_store),
    driver: SurveyDriver = Depends(get_driver),
    settings: ServerSettings = Depends(get_settings),
) -> dict:
    """Validate one survey response.

    Returns the answered values (sentinels removed) and the status of
    every prompt: ``answered``, ``skipped`` or ``not_displayed``.
    Decimal answers are encoded as JSON numbers.
    """
    survey = store.get_survey(survey_id)
    fail_fast = settings.fail_fast if body.fail_fast is None else body.fail_fast
    result = driver.validate_response(survey, body.responses, fail_fast=fail_fast)
    return {
        "survey_id": result.survey_id,
        "values": jsonable_encoder(result.values),
        "statuses": {pid: slot.status for pid, slot in result.slots.items()},
    }
