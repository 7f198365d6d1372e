"""Shared fixtures: in-memory database and object store, and a test client for the API."""

import asyncio
import logging
from datetime import datetime, timezone

import httpx
import pytest
from fastapi.testclient import TestClient

from server.api_server import app
from server.core.DocumentService import DocumentService
from server.core.DownloadService import DownloadService
from shared.clients.db.models.Document import DocumentDetails
from shared.clients.db.models.Paper import PaperDetails
from shared.clients.storage.models.StorageObject import StorageObject
from shared.helper.HelperConfig import HelperConfig


class FakeDBClient:
    """In-memory stand-in for DBClientInterface."""

    def __init__(self, documents: list[DocumentDetails] | None = None) -> None:
        self.documents = {document.id: document for document in documents or []}
        self.calls: list[str] = []
        # rows the papers table returns when the embedded select comes back empty
        self.papers_table: dict[str, list[PaperDetails]] = {}

    def get_client_type(self) -> str:
        return "db"

    def get_engine_name(self) -> str:
        return "memory"

    async def do_healthcheck(self) -> httpx.Response:
        return httpx.Response(200)

    async def do_fetch_document(self, document_id: str) -> DocumentDetails | None:
        self.calls.append(document_id)
        document = self.documents.get(document_id)
        return document.model_copy(deep=True) if document else None

    async def do_fetch_papers(self, document_id: str) -> list[PaperDetails]:
        document = self.documents.get(document_id)
        if document_id in self.papers_table:
            return list(self.papers_table[document_id])
        return list(document.papers) if document else []


class FakeStorageClient:
    """In-memory stand-in for StorageClientInterface.

    objects maps references to bytes, failures maps references to exceptions
    raised instead of answering, delays maps references to seconds slept first.
    """

    def __init__(self, objects: dict[str, bytes] | None = None) -> None:
        self.objects = dict(objects or {})
        self.failures: dict[str, Exception] = {}
        self.delays: dict[str, float] = {}
        self.fetched: list[str] = []

    def get_client_type(self) -> str:
        return "storage"

    def get_engine_name(self) -> str:
        return "memory"

    async def do_healthcheck(self) -> httpx.Response:
        return httpx.Response(200)

    async def do_fetch_object(self, reference: str) -> StorageObject:
        if reference in self.delays:
            await asyncio.sleep(self.delays[reference])
        self.fetched.append(reference)
        if reference in self.failures:
            raise self.failures[reference]
        if reference not in self.objects:
            return StorageObject(reference=reference, found=False, error="Object not found")
        return StorageObject(reference=reference, found=True, content=self.objects[reference])


def make_paper(paper_id: str, document_id: str = "D1", **kwargs) -> PaperDetails:
    values = {
        "engine": "memory",
        "id": paper_id,
        "document_id": document_id,
        "title": f"paper {paper_id}",
        "file_type": "pdf",
        "created_at": datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc),
    }
    values.update(kwargs)
    return PaperDetails(**values)


def make_document(document_id: str, title: str = "Case file", papers: list[PaperDetails] | None = None) -> DocumentDetails:
    return DocumentDetails(
        engine="memory",
        id=document_id,
        title=title,
        reference="A.1.1",
        category="civil",
        status="active",
        papers=papers or [],
    )


@pytest.fixture
def helper_config() -> HelperConfig:
    return HelperConfig(logger=logging.getLogger("tests"))


@pytest.fixture
def db_client() -> FakeDBClient:
    return FakeDBClient()


@pytest.fixture
def storage_client() -> FakeStorageClient:
    return FakeStorageClient()


@pytest.fixture
def document_service(helper_config, db_client) -> DocumentService:
    return DocumentService(helper_config=helper_config, db_client=db_client)


@pytest.fixture
def download_service(helper_config, document_service, storage_client) -> DownloadService:
    return DownloadService(
        helper_config=helper_config,
        document_service=document_service,
        storage_client=storage_client,
    )


@pytest.fixture
def api(helper_config, db_client, storage_client, document_service, download_service, monkeypatch):
    """TestClient on the real app with in-memory backends wired into app.state (lifespan is not run)."""
    monkeypatch.delenv("API_SERVER_API_KEY", raising=False)
    app.state.logging = helper_config.get_logger()
    app.state.helper_config = helper_config
    app.state.app_version = "test"
    app.state.clients = [db_client, storage_client]
    app.state.document_service = document_service
    app.state.download_service = download_service
    return TestClient(app)
