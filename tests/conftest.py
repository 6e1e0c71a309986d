from pathlib import Path

import pytest

from survey_rulesets.driver import SurveyDriver
from survey_rulesets.media import InMemoryMediaStore
from survey_rulesets.models.media import MediaBlob
from survey_rulesets.store import SurveyStore
from survey_rulesets.validator import PromptValidator

SURVEY_DIR = Path(__file__).resolve().parent.parent / "surveys"


@pytest.fixture
def media():
    """In-memory media store holding one item of each kind."""
    return InMemoryMediaStore({
        "img1": MediaBlob(id="img1", content_type="image/jpeg", size=2048, width=1024, height=768),
        "aud1": MediaBlob(id="aud1", content_type="audio/mpeg", size=4096, duration_ms=30_000),
        "vid1": MediaBlob(id="vid1", content_type="video/mp4", size=8192, duration_ms=90_000),
    })

@pytest.fixture
def validator(media):
    return PromptValidator(media_store=media)

@pytest.fixture
def driver(validator):
    return SurveyDriver(validator)

@pytest.fixture
def answers():
    """Fresh, empty answer map."""
    return {}

@pytest.fixture(scope="session")
def store():
    s = SurveyStore(SURVEY_DIR)
    s.load()
    return s
