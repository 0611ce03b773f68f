"""
Survey State - Current Survey Name.

============================================================
RESOLUTION ORDER
============================================================
1. Query parameter surveyName, then survey (stored as the
   current name)
2. Survey id (query id, else stored currentSurveyId) looked
   up in the stored id -> name map (stored as current name)
3. Stored currentSurveyName
4. Page attribute data-survey-name
5. "Untitled Survey"

Writes from another store sharing the same storage reach
this store's listeners through the storage subscription.

============================================================
"""

import json
import logging
from typing import Callable, Dict, List, Mapping, Optional

from core.constants import (
    DEFAULT_SURVEY_NAME,
    SURVEY_ID_KEY,
    SURVEY_NAME_KEY,
    SURVEY_NAME_MAP_KEY,
)
from core.storage import KeyValueStorage


logger = logging.getLogger(__name__)

NameListener = Callable[[str], None]

TITLE_SEPARATOR = " - "


def format_title(title: str, name: str) -> str:
    """Replace whatever follows the first separator in a page title with name."""
    base = title.split(TITLE_SEPARATOR)[0]
    return f"{base}{TITLE_SEPARATOR}{name}"


class SurveyNameStore:
    """Resolves, renames and broadcasts the current survey name."""

    def __init__(self, storage: KeyValueStorage):
        self._storage = storage
        self._listeners: List[NameListener] = []
        self._unsubscribe = storage.subscribe(self._on_storage_change)

    # --------------------------------------------------------
    # Id -> name map
    # --------------------------------------------------------

    def name_map(self) -> Dict[str, str]:
        raw = self._storage.get_item(SURVEY_NAME_MAP_KEY)
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring corrupt survey name map")
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _write_map(self, mapping: Mapping[str, str]) -> None:
        self._storage.set_item(SURVEY_NAME_MAP_KEY, json.dumps(dict(mapping), sort_keys=True))

    # --------------------------------------------------------
    # Resolution
    # --------------------------------------------------------

    def resolve(
        self,
        query: Optional[Mapping[str, str]] = None,
        data_attribute: Optional[str] = None,
    ) -> str:
        """
        Resolve the name to show on the current page.

        Args:
            query: Page query parameters
            data_attribute: Value of the page's data-survey-name

        Returns:
            The resolved survey name
        """
        query = query or {}

        from_query = query.get("surveyName") or query.get("survey")
        if from_query:
            self._storage.set_item(SURVEY_NAME_KEY, from_query)
            return from_query

        survey_id = query.get("id") or self._storage.get_item(SURVEY_ID_KEY)
        if survey_id:
            mapped = self.name_map().get(survey_id)
            if mapped:
                self._storage.set_item(SURVEY_NAME_KEY, mapped)
                return mapped

        stored = self._storage.get_item(SURVEY_NAME_KEY)
        if stored:
            return stored

        return data_attribute or DEFAULT_SURVEY_NAME

    @property
    def current(self) -> str:
        return self._storage.get_item(SURVEY_NAME_KEY) or DEFAULT_SURVEY_NAME

    # --------------------------------------------------------
    # Updates
    # --------------------------------------------------------

    def rename(self, name: str) -> str:
        """
        Rename the current survey.

        Raises:
            ValueError: If the name is blank
        """
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValueError("Survey name must not be blank")
        self._storage.set_item(SURVEY_NAME_KEY, cleaned)
        return cleaned

    def select(self, name: str, survey_id: Optional[str] = None) -> None:
        """Make a survey current, remembering its name under its id."""
        cleaned = self.rename(name)
        if survey_id:
            self._storage.set_item(SURVEY_ID_KEY, str(survey_id))
            mapping = self.name_map()
            mapping[str(survey_id)] = cleaned
            self._write_map(mapping)

    # --------------------------------------------------------
    # Listeners
    # --------------------------------------------------------

    def add_listener(self, listener: NameListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: NameListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def close(self) -> None:
        """Stop following storage changes."""
        self._unsubscribe()

    def _on_storage_change(self, key: str, old: Optional[str], new: Optional[str]) -> None:
        if key != SURVEY_NAME_KEY or old == new:
            return
        name = new or DEFAULT_SURVEY_NAME
        for listener in list(self._listeners):
            try:
                listener(name)
            except Exception as e:
                logger.error(f"Survey name listener failed: {e}")


__all__ = ["SurveyNameStore", "format_title"]
