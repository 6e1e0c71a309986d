"""SurveyStore — loads survey definitions from YAML files into typed models.

Every ``*.yaml`` / ``*.yml`` file in the survey directory holds exactly one
survey.  The store is loaded once at startup and then serves read-only
lookups; the surveys it hands out are immutable and may be shared across
concurrent validation passes.

Usage::

    store = SurveyStore()          # defaults to surveys/ relative to repo root
    store.load()                   # parse every definition file

    survey = store.get_survey("daily_mood")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import yaml

from survey_rulesets.constants import SURVEY_FILE_SUFFIXES
from survey_rulesets.errors import PromptDefinitionError, SurveyDefinitionError
from survey_rulesets.models.survey import Survey, build_survey

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Utility helpers
# ---------------------------------------------------------------------------

def find_repo_root(start: Optional[Path] = None) -> Path:
    """Walk upwards from *start* to find the repo root (dir with pyproject.toml or .git).

    Falls back to cwd if no marker is found.
    """
    p = (start or Path(__file__).resolve()).parent
    for parent in [p, *p.parents]:
        if (parent / "pyproject.toml").exists() or (parent / ".git").exists():
            return parent
    return Path.cwd()


def load_yaml(path: Path | str) -> Any:
    """Load a single YAML file and return the parsed contents."""
    if isinstance(path, str):
        path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing YAML file: {path}")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


# ---------------------------------------------------------------------------
# SurveyStore
# ---------------------------------------------------------------------------

class SurveyStore:
    """Loads all survey definitions from a directory and provides lookup.

    Attributes populated after :meth:`load`:

        surveys — dict[survey_id, Survey], in file-name order
    """

    def __init__(self, survey_dir: str | Path | None = None) -> None:
        if survey_dir is None:
            survey_dir = find_repo_root() / "surveys"
        self._base = Path(survey_dir)

        # Populated by load()
        self.surveys: dict[str, Survey] = {}

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Parse every definition file under the survey directory.

        Call this once at startup.  A single malformed file fails the whole
        load so that no partially valid set of surveys is ever served.

        Raises:
            FileNotFoundError: if the survey directory does not exist.
            PromptDefinitionError, SurveyDefinitionError: if a file holds an
                invalid definition; the message names the file.
        """
        if not self._base.is_dir():
            raise FileNotFoundError(f"Missing survey directory: {self._base}")

        surveys: dict[str, Survey] = {}
        for path in sorted(self._base.iterdir()):
            if path.suffix not in SURVEY_FILE_SUFFIXES or not path.is_file():
                continue
            survey = self._load_file(path)
            if survey.id in surveys:
                raise SurveyDefinitionError(
                    survey.id, f"Duplicate survey id in {path.name}"
                )
            surveys[survey.id] = survey

        self.surveys = surveys
        logger.info(
            "SurveyStore loaded: %d surveys, %d prompts from %s",
            len(surveys),
            sum(len(s.items) for s in surveys.values()),
            self._base,
        )

    def _load_file(self, path: Path) -> Survey:
        raw = load_yaml(path)
        if not isinstance(raw, dict):
            raise SurveyDefinitionError(None, f"{path.name} does not hold a survey mapping")
        try:
            return build_survey(raw)
        except PromptDefinitionError as exc:
            logger.error("Invalid prompt in %s: %s", path.name, exc)
            raise PromptDefinitionError(exc.prompt_id, f"{path.name}: {exc.message}") from exc
        except SurveyDefinitionError as exc:
            logger.error("Invalid survey in %s: %s", path.name, exc)
            raise SurveyDefinitionError(exc.survey_id, f"{path.name}: {exc.message}") from exc

    # ------------------------------------------------------------------
    # Lookup helpers
    # ------------------------------------------------------------------

    def get_survey(self, survey_id: str) -> Survey:
        """Look up a survey by id.

        Raises:
            KeyError: if no survey with that id was loaded.
        """
        try:
            return self.surveys[survey_id]
        except KeyError:
            raise KeyError(f"Survey not found: {survey_id}") from None

    def list_surveys(self) -> list[Survey]:
        """All loaded surveys, in file-name order."""
        return list(self.surveys.values())
