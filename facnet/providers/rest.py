"""
rest store provider - hosted relational store behind a PostgREST-style API.

    GET {endpoint}/rest/v1/{table}?select=*&order=last_name.asc
    headers: apikey, Authorization: Bearer <credential>
"""

import time
import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Sequence

import httpx

from .base import FacultyProvider
from ..core.config import StoreConfig
from ..core.models import Faculty, ResearchTopic, is_topic_key
from ..core.resilience import ResilientAPIClient, RetryConfig, CircuitBreakerConfig

logger = logging.getLogger("facnet.rest")


class RestStoreProvider(FacultyProvider):
    """
    client for the hosted faculty store.
    reads are paged; any failed page fails the fetch.
    """

    PAGE_SIZE = 1000

    def __init__(
        self,
        config: StoreConfig,
        transport: Optional[httpx.BaseTransport] = None,
        retry_config: Optional[RetryConfig] = None,
        sleep: Callable[[float], None] = time.sleep
    ):
        self.config = config
        self.base_url = f"{config.endpoint}/rest/v1"
        self._transport = transport
        self._session: Optional[httpx.Client] = None  # lazy init
        self._session_lock = threading.Lock()

        self._resilient = ResilientAPIClient(
            name="rest-store",
            retry_config=retry_config or RetryConfig(
                max_attempts=3,
                base_delay=1.0,
                max_delay=10.0,
                retryable_exceptions=(
                    ConnectionError,
                    TimeoutError,
                    OSError,
                    httpx.TransportError,
                )
            ),
            circuit_config=CircuitBreakerConfig(
                failure_threshold=5,
                recovery_timeout=60.0
            ),
            sleep=sleep
        )

    @property
    def name(self) -> str:
        return "rest-store"

    @property
    def session(self) -> httpx.Client:
        """lazy session initialization; both fetch threads share one client."""
        with self._session_lock:
            if self._session is None or self._session.is_closed:
                self._session = httpx.Client(
                    timeout=self.config.timeout,
                    transport=self._transport,
                    headers={
                        "apikey": self.config.credential,
                        "Authorization": f"Bearer {self.config.credential}",
                        "Accept": "application/json",
                    }
                )
            return self._session

    def close(self):
        """close the http session."""
        with self._session_lock:
            if self._session and not self._session.is_closed:
                self._session.close()
            self._session = None

    def _request(self, table: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        """one GET with retry; returns the decoded row list."""
        url = f"{self.base_url}/{table}"

        def do_request():
            resp = self.session.get(url, params=params)

            if resp.status_code == 200:
                rows = resp.json()
                if not isinstance(rows, list):
                    raise ValueError(f"expected a row list from {table}, got {type(rows).__name__}")
                return rows
            elif resp.status_code == 429:
                logger.warning(f"[rest] rate limited on {table}")
                raise ConnectionError("rate limited")
            elif resp.status_code >= 500:
                logger.warning(f"[rest] server error {resp.status_code} on {table}")
                raise ConnectionError(f"server error {resp.status_code}")
            else:
                # auth / bad query: retrying will not help
                raise ValueError(f"{table} returned {resp.status_code}: {resp.text[:200]}")

        return self._resilient.execute(do_request, operation_name=f"GET {table}")

    def _fetch_table(self, table: str, order: str) -> List[Dict[str, Any]]:
        rows: List[Dict[str, Any]] = []
        offset = 0
        while True:
            page = self._request(table, {
                "select": "*",
                "order": order,
                "limit": self.PAGE_SIZE,
                "offset": offset,
            })
            rows.extend(page)
            if len(page) < self.PAGE_SIZE:
                break
            offset += self.PAGE_SIZE

        logger.info(f"[rest] fetched {len(rows)} rows from {table}")
        return rows

    def fetch_all_faculty(self) -> List[Faculty]:
        rows = self._fetch_table(self.config.faculty_table, "last_name.asc")
        return self._build_faculty(rows)

    def fetch_all_research_topics(self) -> List[ResearchTopic]:
        rows = self._fetch_table(self.config.topics_table, "display_name.asc")
        return self._build_topics(rows)

    def fetch_faculty_matching(self, topics: Sequence[str], limit: int = 100) -> List[Faculty]:
        """
        server-side candidate query: any selected topic > 0, broadest first.
        unknown keys are dropped; they are not columns.
        """
        known = [t for t in topics if is_topic_key(t)]
        if not known:
            return []

        rows = self._request(self.config.faculty_table, {
            "select": "*",
            "or": "(" + ",".join(f"{t}.gt.0" for t in known) + ")",
            "order": "expertise_breadth.desc",
            "limit": limit,
        })
        return self._build_faculty(rows)

    def stats(self) -> dict:
        return self._resilient.stats()


def create_rest_provider(config: Optional[StoreConfig] = None) -> RestStoreProvider:
    """provider from explicit config, else from the environment."""
    return RestStoreProvider(config or StoreConfig.from_env())
