"""
Persistence gateway for surveys and responses.

The engine needs a handful of operations (list/get/put/delete surveys,
list/put responses, share links) and never assumes a storage technology.
LocalGateway implements them over any KeyValueStore, keeping all surveys
under one key and all responses under another, each as a JSON list that is
rewritten whole on every change (last writer wins).

Errors from the store itself (OSError, corrupt blobs) are not retried or
masked; they propagate to the caller.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from survey_engine.model import Survey, SurveyResponse
from survey_engine.serialization import (
    response_from_dict,
    response_to_dict,
    survey_from_dict,
    survey_to_dict,
)

logger = logging.getLogger(__name__)

SURVEYS_KEY = "survey-builder-surveys"
RESPONSES_KEY = "survey-builder-responses"


class SurveyNotFoundError(LookupError):
    """Raised when a survey id does not exist in the store."""

    def __init__(self, survey_id: str):
        super().__init__(f"Survey not found: {survey_id}")
        self.survey_id = survey_id


class StorageError(Exception):
    """Raised when a stored blob cannot be decoded."""
    pass


# =========================================================================
# KEY-VALUE STORES
# =========================================================================

class KeyValueStore(ABC):
    """Minimal string blob store."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        ...


class MemoryStore(KeyValueStore):
    def __init__(self):
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class FileStore(KeyValueStore):
    """One `<key>.json` file per key inside a directory, created on demand."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self._path(key).write_text(value, encoding="utf-8")

    def delete(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()


# =========================================================================
# GATEWAY
# =========================================================================

class SurveyGateway(ABC):
    """Operations the engine consumes from persistence."""

    @abstractmethod
    def list_surveys(self) -> List[Survey]:
        ...

    @abstractmethod
    def get_survey(self, survey_id: str) -> Survey:
        """Return the survey or raise SurveyNotFoundError."""

    @abstractmethod
    def put_survey(self, survey: Survey) -> None:
        """Insert or replace by id."""

    @abstractmethod
    def delete_survey(self, survey_id: str) -> None:
        ...

    @abstractmethod
    def list_responses(self, survey_id: str) -> List[SurveyResponse]:
        ...

    @abstractmethod
    def put_response(self, response: SurveyResponse) -> None:
        """Append a response and bump its survey's completion_count."""

    @abstractmethod
    def generate_share_link(self, survey_id: str) -> str:
        """Idempotent: a survey that already has a link keeps it."""


class LocalGateway(SurveyGateway):
    """
    SurveyGateway over a KeyValueStore.

    Every read decodes fresh objects from the stored JSON, so callers can
    mutate what they get back without affecting the store until they put it.
    """

    def __init__(self, store: Optional[KeyValueStore] = None, base_url: str = "http://localhost:5173"):
        self.store = store if store is not None else MemoryStore()
        self.base_url = base_url.rstrip("/")

    def _load(self, key: str) -> List[dict]:
        raw = self.store.get(key)
        if raw is None:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt blob under {key!r}: {e}") from e
        if not isinstance(data, list):
            raise StorageError(f"Corrupt blob under {key!r}: expected a list, got {type(data).__name__}")
        return data

    def _save(self, key: str, records: Iterable[dict]) -> None:
        self.store.set(key, json.dumps(list(records)))

    # -- surveys ----------------------------------------------------------

    def list_surveys(self) -> List[Survey]:
        return [survey_from_dict(d) for d in self._load(SURVEYS_KEY)]

    def get_survey(self, survey_id: str) -> Survey:
        for d in self._load(SURVEYS_KEY):
            if d.get("id") == survey_id:
                return survey_from_dict(d)
        raise SurveyNotFoundError(survey_id)

    def put_survey(self, survey: Survey) -> None:
        records = self._load(SURVEYS_KEY)
        encoded = survey_to_dict(survey)
        for i, d in enumerate(records):
            if d.get("id") == survey.id:
                records[i] = encoded
                break
        else:
            records.append(encoded)
        self._save(SURVEYS_KEY, records)
        logger.info("Stored survey %s (%s)", survey.id, survey.status.value)

    def delete_survey(self, survey_id: str) -> None:
        records = self._load(SURVEYS_KEY)
        self._save(SURVEYS_KEY, [d for d in records if d.get("id") != survey_id])
        logger.info("Deleted survey %s", survey_id)

    # -- responses --------------------------------------------------------

    def list_responses(self, survey_id: str) -> List[SurveyResponse]:
        return [response_from_dict(d) for d in self._load(RESPONSES_KEY) if d.get("surveyId") == survey_id]

    def put_response(self, response: SurveyResponse) -> None:
        survey = self.get_survey(response.survey_id)
        records = self._load(RESPONSES_KEY)
        records.append(response_to_dict(response))
        self._save(RESPONSES_KEY, records)
        survey.completion_count += 1
        self.put_survey(survey)
        logger.info("Stored response %s; survey %s now has %d", response.id, survey.id, survey.completion_count)

    # -- sharing ----------------------------------------------------------

    def generate_share_link(self, survey_id: str) -> str:
        survey = self.get_survey(survey_id)
        if survey.shareable_link:
            return survey.shareable_link
        survey.shareable_link = f"{self.base_url}/survey/{survey_id}/take"
        self.put_survey(survey)
        return survey.shareable_link

    # -- maintenance ------------------------------------------------------

    def clear_all(self) -> None:
        """Remove every survey and response."""
        self.store.delete(SURVEYS_KEY)
        self.store.delete(RESPONSES_KEY)
        logger.info("Cleared all surveys and responses")

    def seed(self, surveys: Iterable[Survey]) -> bool:
        """
        Store sample surveys when the store holds none, giving each a share
        link. Returns True if anything was written.
        """
        if self._load(SURVEYS_KEY):
            return False
        for survey in surveys:
            self.put_survey(survey)
            self.generate_share_link(survey.id)
        return True
