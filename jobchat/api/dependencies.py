"""Shared service objects and the FastAPI dependency that exposes them."""

from dataclasses import dataclass

from fastapi import Request

from jobchat.catalog import Catalog
from jobchat.composer import ResponseComposer
from jobchat.extraction import FilterExtractor
from jobchat.matching import MatchEngine
from jobchat.sessions import SessionStore


@dataclass
class AppServices:
    """Everything a request handler needs, created once per process.

    Attributes:
        catalog: Read-only job catalog
        extractor: Message-to-filters service
        engine: Tiered match engine over the catalog
        composer: Reply composer (model-backed or templated)
        sessions: Conversation history store
    """

    catalog: Catalog
    extractor: FilterExtractor
    engine: MatchEngine
    composer: ResponseComposer
    sessions: SessionStore


def get_services(request: Request) -> AppServices:
    return request.app.state.services
