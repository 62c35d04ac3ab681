"""FastAPI application exposing DoccSearch lookups and search."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, List, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from doccsearch.config import AppConfig
from doccsearch.errors import ArchiveNotFoundError, EmbeddingUnavailableError
from doccsearch.service import DocService

LOGGER = logging.getLogger(__name__)

ARCHIVE_PATHS_ENV = "DOCCSEARCH_ARCHIVE_PATHS"
INDEX_DIR_ENV = "DOCCSEARCH_INDEX_DIR"


class SearchPayload(BaseModel):
    query: str
    archive: str | None = None
    type: str | None = None
    mode: str = "auto"
    limit: int = 10


def _config_from_env() -> AppConfig:
    paths = [Path(p) for p in os.environ.get(ARCHIVE_PATHS_ENV, "").split(os.pathsep) if p]
    index_dir = os.environ.get(INDEX_DIR_ENV)
    return AppConfig(archive_paths=paths, index_dir=Path(index_dir) if index_dir else None)


def _service(request: Request) -> DocService:
    service = getattr(request.app.state, "service", None)
    if service is None:
        service = DocService(_config_from_env())
        request.app.state.service = service
    return service


def create_app(service: DocService | None = None) -> FastAPI:
    app = FastAPI(title="DoccSearch", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.service = service

    @app.on_event("startup")
    async def startup_event() -> None:
        logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")

    @app.post("/search")
    async def search_documents(payload: SearchPayload, request: Request) -> dict[str, List[Any]]:
        query = payload.query.strip()
        if not query:
            raise HTTPException(status_code=400, detail="Empty query")
        if payload.mode not in {"auto", "text", "semantic", "keyword"}:
            raise HTTPException(status_code=400, detail=f"Unknown search mode: {payload.mode}")

        limit = max(1, min(payload.limit, 50))
        try:
            results = _service(request).search(
                query,
                archive=payload.archive,
                kind=payload.type,
                mode=payload.mode,  # type: ignore[arg-type]
                limit=limit,
            )
        except EmbeddingUnavailableError as exc:
            raise HTTPException(status_code=503, detail=str(exc)) from exc
        return {"results": [result.to_dict() for result in results]}

    @app.get("/archives")
    async def list_archives(request: Request) -> dict[str, List[Any]]:
        archives = _service(request).list_archives()
        return {"archives": [record.to_dict() for record in archives]}

    @app.get("/archives/{archive}/symbols/{symbol_id:path}")
    async def get_symbol(
        archive: str,
        symbol_id: str,
        request: Request,
        include_references: bool = False,
        max_sections: Optional[int] = Query(10, ge=0),
        summary_only: bool = False,
    ) -> dict[str, Any]:
        symbol = _service(request).get_symbol(
            symbol_id,
            archive,
            include_references=include_references,
            max_sections=max_sections,
            summary_only=summary_only,
        )
        if symbol is None:
            raise HTTPException(status_code=404, detail=f"Symbol {symbol_id} not found in {archive}")
        return symbol

    @app.get("/archives/{archive}/articles/{article_id:path}")
    async def get_article(archive: str, article_id: str, request: Request) -> dict[str, Any]:
        article = _service(request).get_article(article_id, archive)
        if article is None:
            raise HTTPException(status_code=404, detail=f"Article {article_id} not found in {archive}")
        return article

    @app.get("/archives/{archive}/browse")
    async def browse_archive(archive: str, request: Request, path: str | None = None) -> dict[str, Any]:
        try:
            structure = _service(request).browse_archive(archive, path)
        except ArchiveNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        if structure is None:
            raise HTTPException(status_code=404, detail=f"Cannot browse path: {path or '/'}")
        return structure

    @app.get("/stats")
    async def index_stats(request: Request) -> dict[str, Any]:
        service = _service(request)
        service.load_indices()
        return service.stats()

    return app


app = create_app()
