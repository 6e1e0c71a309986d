"""Survey definition endpoints — listing, detail, and response schemas.

These are read-only endpoints over the definitions loaded at startup.
Schemas are derived from the prompts alone, so no response data is needed.
"""

from fastapi import APIRouter, Depends

from survey_rulesets.store import SurveyStore

from survey_server.dependencies import get_store

router = APIRouter(prefix="/surveys", tags=["surveys"])


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.get("")
def list_surveys(
    store: SurveyStore = Depends(get_store),
) -> list[dict]:
    """Return a summary of every loaded survey."""
    return [
        {
            "id": survey.id,
            "name": survey.name,
            "description": survey.description,
            "version": survey.version,
            "prompts": len(survey.items),
        }
        for survey in store.list_surveys()
    ]


@router.get("/{survey_id}")
def get_survey(
    survey_id: str,
    store: SurveyStore = Depends(get_store),
) -> dict:
    """Return the full definition of one survey."""
    survey = store.get_survey(survey_id)
    return survey.model_dump(mode="json", exclude_none=True)


@router.get("/{survey_id}/schema")
def get_survey_schema(
    survey_id: str,
    store: SurveyStore = Depends(get_store),
) -> list[dict]:
    """Return the per-prompt response schemas in declaration order."""
    survey = store.get_survey(survey_id)
    return [s.model_dump(mode="json", exclude_none=True) for s in survey.response_schema()]
