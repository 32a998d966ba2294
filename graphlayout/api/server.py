"""
Graph Layout API Server
=======================

Serves computed layouts to the render adapter.

Endpoints:
- GET  /health                 -> Liveness
- POST /api/v1/layout          -> Lay out the posted {nodes, edges} document
- GET  /api/v1/layout?url=...  -> Load a document, then lay it out
- GET  /api/v1/diagnostics     -> Issue and counter summary

Usage:
    uvicorn graphlayout.api.server:app --reload
"""
import os
from dataclasses import replace
from typing import Mapping, Optional, Tuple

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from ..contracts.base import ConfigError, GraphDocument, IntegrityError
from ..contracts.layout import LayoutConfig, RankDirection
from ..engine import GraphLayoutPipeline
from ..ingestion import FetchStatus, GraphDocumentLoader, GraphDocumentModel, is_remote
from ..observability import LayoutDiagnostics
from .mapper import map_result_to_dto

DOCUMENT_URL_ENV = "GRAPHLAYOUT_DOCUMENT_URL"
HOST_ENV = "GRAPHLAYOUT_HOST"
PORT_ENV = "GRAPHLAYOUT_PORT"


def bind_address(environ: Optional[Mapping[str, str]] = None) -> Tuple[str, int]:
    """Host and port for the dev server, from GRAPHLAYOUT_HOST / GRAPHLAYOUT_PORT."""
    environ = os.environ if environ is None else environ
    host = environ.get(HOST_ENV) or "127.0.0.1"
    raw_port = environ.get(PORT_ENV) or "8000"
    try:
        port = int(raw_port)
    except ValueError as e:
        raise ConfigError(f"Invalid value for {PORT_ENV}: {raw_port!r}") from e
    if not 0 < port < 65536:
        raise ConfigError(f"{PORT_ENV} out of range: {port}")
    return host, port


def create_app(
    config: Optional[LayoutConfig] = None,
    loader: Optional[GraphDocumentLoader] = None,
    default_url: Optional[str] = None
) -> FastAPI:
    """Build the API with its own config, loader and diagnostics."""
    app = FastAPI(
        title="Graph Layout API",
        version="0.1.0",
        description="Deterministic layered layout for entity graphs",
    )

    app.state.config = config or LayoutConfig.from_env()
    app.state.loader = loader or GraphDocumentLoader()
    app.state.diagnostics = LayoutDiagnostics()
    app.state.default_url = default_url or os.environ.get(DOCUMENT_URL_ENV)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    def pipeline_for(direction: Optional[str]) -> GraphLayoutPipeline:
        cfg: LayoutConfig = app.state.config
        if direction:
            try:
                rank_direction = RankDirection(direction.upper())
            except ValueError:
                raise HTTPException(status_code=400, detail=f"Unknown direction: {direction}")
            cfg = replace(cfg, rank_direction=rank_direction)
        return GraphLayoutPipeline(cfg, app.state.diagnostics)

    def run(pipeline: GraphLayoutPipeline, document: GraphDocument):
        try:
            result = pipeline.run_document(document)
        except IntegrityError as e:
            raise HTTPException(status_code=409, detail=str(e))
        return map_result_to_dto(result)

    @app.get("/health")
    async def health_check():
        return {"status": "online"}

    @app.post("/api/v1/layout")
    async def post_layout(
        document: GraphDocumentModel,
        direction: Optional[str] = Query(default=None, description="TB or LR")
    ):
        """Lay out a posted document."""
        return run(pipeline_for(direction), document.to_document())

    @app.get("/api/v1/layout")
    async def get_layout(
        url: Optional[str] = Query(default=None, description="Document URL or path"),
        direction: Optional[str] = Query(default=None, description="TB or LR")
    ):
        """
        Load a document and lay it out.

        Only http(s) URLs are accepted from callers; a local path is only
        honoured as the server-configured default. Fetch failures map to 502,
        malformed documents to 422.
        """
        if url is not None and not is_remote(url):
            raise HTTPException(status_code=400, detail="Only http(s) document URLs are accepted")
        location = url or app.state.default_url
        if not location:
            raise HTTPException(status_code=400, detail="No document URL given")

        pipeline = pipeline_for(direction)
        loaded = await app.state.loader.load(location)
        if loaded.status == FetchStatus.PARSE_ERROR:
            raise HTTPException(status_code=422, detail=loaded.error_message)
        if not loaded.is_success:
            raise HTTPException(status_code=502, detail=loaded.error_message)

        return run(pipeline, loaded.document)

    @app.get("/api/v1/diagnostics")
    async def get_diagnostics():
        return app.state.diagnostics.report()

    return app


app = create_app()
