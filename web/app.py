"""
facnet web application - JSON API over one explorer session.

run:
    FACNET_SNAPSHOT=roster.json uvicorn web.app:app --port 8765
    (or set FACNET_DB_ENDPOINT / FACNET_API_TOKEN for the REST store)

endpoints:
    GET  /api/health                    → load status
    GET  /api/topics                    → topics with faculty counts
    POST /api/search                    → ranked faculty for up to 3 topics
    GET  /api/relationships             → tiered topic relationships
    GET  /api/network/topics            → level 1 network
    GET  /api/network/clusters/{topic}  → level 2 network
    GET  /api/network/ego/{email}       → level 3 network
"""

import os
import logging
import threading
from dataclasses import asdict
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel

from facnet import __version__
from facnet.core.config import FacnetConfig, StoreConfig, ConfigurationError
from facnet.core.models import MAX_EXPERTISE
from facnet.core.resilience import setup_logging
from facnet.providers.rest import RestStoreProvider
from facnet.providers.snapshot import SnapshotProvider
from facnet.scoring.relevance import normalize_selection
from facnet.scoring.search import SearchFilters, SearchSummary
from facnet.session import ExplorerSession, SessionStatus
from facnet.visualization.exporter import GraphExporter

logger = logging.getLogger("facnet.web")

SNAPSHOT_ENV = "FACNET_SNAPSHOT"


# models
class SearchRequest(BaseModel):
    topics: List[str]
    min_relevance: float = 0.0
    school: Optional[str] = None
    rank: Optional[str] = None
    min_expertise_breadth: Optional[int] = None
    search_term: Optional[str] = None


def session_from_env(config: Optional[FacnetConfig] = None) -> ExplorerSession:
    """snapshot file if FACNET_SNAPSHOT is set, else the REST store."""
    snapshot = os.environ.get(SNAPSHOT_ENV)
    if snapshot:
        provider = SnapshotProvider(snapshot)
    else:
        provider = RestStoreProvider(StoreConfig.from_env())
    return ExplorerSession(provider, config)


def create_app(session: Optional[ExplorerSession] = None) -> FastAPI:
    """
    build the API around a session.

    without a session one is created from the environment at startup;
    a missing configuration leaves the API answering 503.
    """
    app = FastAPI(title="facnet", description="Faculty expertise explorer", version=__version__)
    app.state.session = session
    app.state.startup_error = None
    exporter = GraphExporter()

    def ready_session() -> ExplorerSession:
        current = app.state.session
        if current is None:
            raise HTTPException(status_code=503, detail=app.state.startup_error or "not configured")
        if current.status == SessionStatus.LOADING:
            raise HTTPException(status_code=503, detail="roster is loading")
        if current.status == SessionStatus.ERROR:
            raise HTTPException(status_code=503, detail=current.error)
        return current

    @app.on_event("startup")
    async def startup():
        if app.state.session is None:
            setup_logging(level=logging.INFO)
            try:
                app.state.session = session_from_env()
            except ConfigurationError as e:
                app.state.startup_error = str(e)
                logger.error(f"[web] {e}")
                return

        current = app.state.session
        if current.status == SessionStatus.LOADING:
            # fetch in the background; requests see 503 until ready
            threading.Thread(target=current.load, name="facnet-load", daemon=True).start()

    @app.on_event("shutdown")
    async def shutdown():
        if app.state.session is not None:
            app.state.session.close()

    @app.get("/api/health")
    async def health():
        """load status; always 200."""
        current = app.state.session
        if current is None:
            return {"status": SessionStatus.ERROR.value, "error": app.state.startup_error}
        return {
            "status": current.status.value,
            "error": current.error,
            "faculty_count": len(current.faculty),
            "topic_count": len(current.topics),
        }

    @app.get("/api/topics")
    def topics():
        current = ready_session()
        counts = current.topic_counts()
        return [
            {
                **topic.to_dict(),
                "faculty_count": counts.get(topic.topic_key),
                "coverage": counts.coverage(topic.topic_key).value,
            }
            for topic in current.topics
        ]

    @app.post("/api/search")
    def search(req: SearchRequest):
        current = ready_session()
        limit = current.config.search.max_selected_topics
        selected = normalize_selection(req.topics)
        if len(selected) > limit:
            raise HTTPException(status_code=422, detail=f"select at most {limit} topics")

        filters = SearchFilters(
            school=req.school,
            rank=req.rank,
            min_expertise_breadth=req.min_expertise_breadth,
            search_term=req.search_term,
        )
        results = current.search(selected, filters=filters, min_relevance=req.min_relevance)
        return {
            "topics": selected,
            "summary": asdict(SearchSummary.from_results(results)),
            "results": [r.to_dict() for r in results],
        }

    @app.get("/api/relationships")
    def relationships():
        current = ready_session()
        return [r.to_dict() for r in current.relationships()]

    @app.get("/api/network/topics")
    def topic_network(threshold: Optional[int] = Query(None, ge=0, le=MAX_EXPERTISE)):
        current = ready_session()
        data = current.processor(threshold).generate_topic_network()
        return exporter.to_json(data)

    @app.get("/api/network/clusters/{topic_key}")
    def cluster_network(topic_key: str, threshold: Optional[int] = Query(None, ge=0, le=MAX_EXPERTISE)):
        current = ready_session()
        data = current.processor(threshold).generate_faculty_cluster_network(topic_key)
        return exporter.to_json(data)

    @app.get("/api/network/ego/{email}")
    def ego_network(email: str, threshold: Optional[int] = Query(None, ge=0, le=MAX_EXPERTISE)):
        current = ready_session()
        # unknown emails get the empty network, like unknown cluster topics
        data = current.processor(threshold).generate_faculty_ego_network(email.lower())
        return exporter.to_json(data)

    return app


app = create_app()
