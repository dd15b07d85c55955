from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dotenv import load_dotenv

from endpoints.document_endpoints import DocumentResource, router as documents_router
from persistence import DocumentStore, InMemoryDocumentStore
from settings import Settings, get_settings

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(level)


def create_app(store: DocumentStore | None = None, settings: Settings | None = None) -> FastAPI:
    load_dotenv("local.env")
    settings = settings or get_settings()
    _configure_logging(settings.log_level)

    app = FastAPI(title="document-service")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.debug_log_requests:

        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            response = await call_next(request)
            logger.info("REQUEST %s %s -> %s", request.method, request.url.path, response.status_code)
            return response

    # One store per app; every request shares it through the resource.
    if store is None:
        store = InMemoryDocumentStore()
    app.state.document_resource = DocumentResource(
        store,
        random_attribute_key=settings.random_attribute_key,
        base_url=settings.public_base_url,
    )
    logger.info("Document service ready (store=%s)", type(store).__name__)

    @app.get("/health")
    async def health():
        return JSONResponse({"status": "ok"})

    app.include_router(documents_router)

    return app


app = create_app()
