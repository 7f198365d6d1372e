"""FastAPI application entry point for the judicial archive bridge."""

import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.logging.logging_setup import setup_logging
from shared.helper.HelperConfig import HelperConfig
from shared.clients.ClientInterface import ClientInterface
from shared.clients.db.DBClientManager import DBClientManager
from shared.clients.storage.StorageClientManager import StorageClientManager
from server.core.DocumentService import DocumentService
from server.core.DownloadService import DownloadService
from server.models.errors import ArchiveServiceError
from server.routers.DocumentRouter import router as document_router
from server.routers.HealthRouter import router as health_router

logging = setup_logging()
app_version = os.getenv("APP_VERSION", "unknown")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # when the app starts
    app.state.logging = logging
    app.state.app_version = app_version
    app.state.helper_config = HelperConfig(logger=logging)

    db_client = DBClientManager(helper_config=app.state.helper_config).get_client()
    storage_client = StorageClientManager(helper_config=app.state.helper_config).get_client()
    clients: list[ClientInterface] = [db_client, storage_client]

    logging.info("Booting all clients...")
    for client in clients:
        await client.boot()
    logging.info("All clients booted successfully.")

    app.state.clients = clients
    app.state.document_service = DocumentService(
        helper_config=app.state.helper_config,
        db_client=db_client,
    )
    app.state.download_service = DownloadService(
        helper_config=app.state.helper_config,
        document_service=app.state.document_service,
        storage_client=storage_client,
    )

    await check_connections(clients)

    # while the app is running...
    yield

    # when the app shuts down, close all client connections
    logging.info("Shutting down, closing all clients...")
    for client in clients:
        await client.close()
    logging.info("All clients closed.")


app = FastAPI(
    title="judicial_archive_bridge",
    description=(
        "REST layer over the Supabase backend of the judicial document archive. "
        "Serves documents and their papers, and bundles all papers of a document "
        "into a ZIP archive via POST /api/documents/{id}/download."
    ),
    version=app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)

app.include_router(document_router)
app.include_router(health_router)


@app.exception_handler(ArchiveServiceError)
async def handle_archive_error(request: Request, exc: ArchiveServiceError) -> JSONResponse:
    """Render domain errors as {"message": ...} with their own status code."""
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(StarletteHTTPException)
async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Keep the {"message": ...} error shape for framework errors (unknown routes, auth)."""
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)}, headers=exc.headers)


async def check_connections(clients: list[ClientInterface]) -> None:
    """Check connectivity to all configured backends on startup.

    Failures are non-fatal: the server stays up and downloads report their
    own errors (missing files become placeholders, database failures 500).
    """
    for client in clients:
        try:
            result: httpx.Response = await client.do_healthcheck()
        except httpx.HTTPError as exc:
            logging.warning(
                "%s client '%s' is not reachable: %s",
                client.get_client_type().upper(), client.__class__.__name__, exc,
            )
            continue
        if not result.is_success:
            logging.warning(
                "%s client '%s' answered its healthcheck with status %d.",
                client.get_client_type().upper(), client.__class__.__name__, result.status_code,
            )


if __name__ == "__main__":
    import uvicorn

    logging.info(
        "Starting judicial archive bridge v%s on port %d...",
        app_version,
        int(os.getenv("API_SERVER_PORT", "8000")),
    )
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("API_SERVER_PORT", "8000")))
