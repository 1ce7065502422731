"""
offline providers - roster snapshots on disk and in memory.
supports: JSON exports ({"faculty": [...], "research_topics": [...]}) and
CSV faculty rosters with one column per topic key.
"""

import csv
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from .base import FacultyProvider
from ..core.models import Faculty, ResearchTopic, default_research_topics
from ..core.resilience import CollaboratorUnavailable

logger = logging.getLogger("facnet.snapshot")


class SnapshotProvider(FacultyProvider):
    """
    reads a roster snapshot file.
    topics fall back to the canonical catalogue when the file has none.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._cache: Optional[Dict[str, Any]] = None

    @property
    def name(self) -> str:
        return f"snapshot:{self.path.name}"

    def _load(self) -> Dict[str, Any]:
        if self._cache is not None:
            return self._cache

        if not self.path.exists():
            raise CollaboratorUnavailable(f"snapshot not found: {self.path}", source=self.name)

        try:
            if self.path.suffix.lower() == ".csv":
                data = self._load_csv()
            else:
                data = self._load_json()
        except (OSError, ValueError) as e:
            raise CollaboratorUnavailable(
                f"unreadable snapshot {self.path}: {e}", source=self.name, cause=e
            ) from e

        self._cache = data
        logger.info(
            f"[snapshot] loaded {len(data['faculty'])} faculty rows from {self.path}"
        )
        return data

    def _load_json(self) -> Dict[str, Any]:
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)

        # a bare list is a faculty-only export
        if isinstance(data, list):
            return {"faculty": data, "research_topics": None}

        if not isinstance(data, dict):
            raise ValueError(f"unexpected JSON format in {self.path}")

        faculty = data.get("faculty")
        if not isinstance(faculty, list):
            raise ValueError("snapshot has no 'faculty' list")

        topics = data.get("research_topics", data.get("topics"))
        return {"faculty": faculty, "research_topics": topics}

    def _load_csv(self) -> Dict[str, Any]:
        with open(self.path, "r", encoding="utf-8", newline="") as f:
            rows = list(csv.DictReader(f))
        # csv cells are strings; blanks read as missing
        cleaned = [{k: (v if v != "" else None) for k, v in row.items() if k} for row in rows]
        return {"faculty": cleaned, "research_topics": None}

    def fetch_all_faculty(self) -> List[Faculty]:
        return self._build_faculty(self._load()["faculty"])

    def fetch_all_research_topics(self) -> List[ResearchTopic]:
        rows = self._load()["research_topics"]
        if rows is None:
            return default_research_topics()
        return self._build_topics(rows)


class InMemoryProvider(FacultyProvider):
    """
    serves rows held in process.
    accepts typed records or raw store rows.
    """

    def __init__(
        self,
        faculty: Sequence[Union[Faculty, Dict[str, Any]]],
        topics: Optional[Sequence[Union[ResearchTopic, Dict[str, Any]]]] = None
    ):
        self._faculty = list(faculty)
        self._topics = None if topics is None else list(topics)

    @property
    def name(self) -> str:
        return "memory"

    def fetch_all_faculty(self) -> List[Faculty]:
        return [
            f if isinstance(f, Faculty) else self._build_faculty([f])[0]
            for f in self._faculty
        ]

    def fetch_all_research_topics(self) -> List[ResearchTopic]:
        if self._topics is None:
            return default_research_topics()
        return [
            t if isinstance(t, ResearchTopic) else self._build_topics([t])[0]
            for t in self._topics
        ]
