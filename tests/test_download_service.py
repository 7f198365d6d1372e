import asyncio
import zipfile
from io import BytesIO

import httpx
import pytest

from conftest import make_document, make_paper
from server.core.ArchiveBuilder import ArchiveBuilder
from server.core.DownloadService import DownloadService
from server.models.errors import DocumentNotFoundError, EmptyDocumentError


class SpyArchiveBuilder(ArchiveBuilder):
    def __init__(self) -> None:
        super().__init__()
        self.calls = 0

    def build(self, entries):
        self.calls += 1
        return super().build(entries)


def _entries(content: bytes) -> dict[str, bytes]:
    archive = zipfile.ZipFile(BytesIO(content))
    return {name: archive.read(name) for name in archive.namelist()}


def _names(content: bytes) -> list[str]:
    return zipfile.ZipFile(BytesIO(content)).namelist()


def test_document_with_stored_file_and_missing_attachment(db_client, storage_client, download_service):
    db_client.documents["D1"] = make_document(
        "D1",
        title="حكم 123",
        papers=[
            make_paper("p1", title="judgement", file_type="pdf", storage_reference="D1/judgement.pdf"),
            make_paper("p2", title="notes", file_type="pdf", storage_reference=None),
        ],
    )
    storage_client.objects["D1/judgement.pdf"] = b"0123456789"

    archive = asyncio.run(download_service.do_download("D1"))

    assert archive.filename == "حكم_123.zip"
    assert archive.entry_count == 2
    assert archive.placeholder_count == 1
    entries = _entries(archive.content)
    assert entries["judgement.pdf"] == b"0123456789"
    placeholder = entries["notes.pdf"].decode("utf-8")
    assert "no attachment was ever provided" in placeholder
    assert "Paper ID: p2" in placeholder
    assert "Document ID: D1" in placeholder
    # nothing was asked of the store for the paper without a reference
    assert storage_client.fetched == ["D1/judgement.pdf"]


def test_empty_document_is_refused_before_any_fetch(helper_config, document_service, db_client, storage_client):
    db_client.documents["D2"] = make_document("D2", papers=[])
    builder = SpyArchiveBuilder()
    service = DownloadService(
        helper_config=helper_config,
        document_service=document_service,
        storage_client=storage_client,
        archive_builder=builder,
    )

    with pytest.raises(EmptyDocumentError) as exc_info:
        asyncio.run(service.do_download("D2"))

    assert exc_info.value.status_code == 400
    assert builder.calls == 0
    assert storage_client.fetched == []


def test_unknown_document_is_not_found(download_service, storage_client):
    with pytest.raises(DocumentNotFoundError) as exc_info:
        asyncio.run(download_service.do_download("D3"))

    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "الوثيقة غير موجودة"
    assert storage_client.fetched == []


def test_all_files_present_gives_byte_identical_entries(db_client, storage_client, download_service):
    papers = [make_paper(f"p{i}", title=f"page {i}", storage_reference=f"D1/{i}.pdf") for i in range(8)]
    db_client.documents["D1"] = make_document("D1", papers=papers)
    for i in range(8):
        storage_client.objects[f"D1/{i}.pdf"] = f"content of page {i}".encode() * (i + 1)

    archive = asyncio.run(download_service.do_download("D1"))

    assert archive.placeholder_count == 0
    entries = _entries(archive.content)
    assert len(entries) == 8
    for i in range(8):
        assert entries[f"page {i}.pdf"] == storage_client.objects[f"D1/{i}.pdf"]


def test_missing_object_becomes_placeholder_with_store_error(db_client, storage_client, download_service):
    db_client.documents["D1"] = make_document(
        "D1", papers=[make_paper("p7", title="lost", file_type="docx", storage_reference="D1/lost.docx")]
    )

    archive = asyncio.run(download_service.do_download("D1"))

    placeholder = _entries(archive.content)["lost.docx"].decode("utf-8")
    assert "not available in storage" in placeholder
    assert "Paper ID: p7" in placeholder
    assert "Storage Error: Object not found" in placeholder
    assert "Created: 2024-03-01T09:30:00+00:00" in placeholder


def test_failing_fetch_is_isolated_to_its_paper(db_client, storage_client, download_service):
    db_client.documents["D1"] = make_document(
        "D1",
        papers=[
            make_paper("p1", title="first", storage_reference="D1/first.pdf"),
            make_paper("p2", title="broken", storage_reference="D1/broken.pdf"),
            make_paper("p3", title="third", storage_reference="D1/third.pdf"),
        ],
    )
    storage_client.objects["D1/first.pdf"] = b"first"
    storage_client.objects["D1/third.pdf"] = b"third"
    storage_client.failures["D1/broken.pdf"] = httpx.ConnectTimeout("timed out")

    archive = asyncio.run(download_service.do_download("D1"))

    assert _names(archive.content) == ["first.pdf", "broken.txt", "third.pdf"]
    entries = _entries(archive.content)
    assert entries["first.pdf"] == b"first"
    assert entries["third.pdf"] == b"third"
    error_text = entries["broken.txt"].decode("utf-8")
    assert error_text.startswith("Error loading file: broken")
    assert "Error: timed out" in error_text
    assert archive.placeholder_count == 1


def test_entry_order_follows_papers_not_completion(db_client, storage_client, download_service):
    papers = [make_paper(f"p{i}", title=f"n{i}", storage_reference=f"r{i}") for i in range(4)]
    db_client.documents["D1"] = make_document("D1", papers=papers)
    for i in range(4):
        storage_client.objects[f"r{i}"] = b"x"
        # first paper finishes last
        storage_client.delays[f"r{i}"] = 0.2 - i * 0.05

    archive = asyncio.run(download_service.do_download("D1"))

    assert storage_client.fetched == ["r3", "r2", "r1", "r0"]
    assert _names(archive.content) == ["n0.pdf", "n1.pdf", "n2.pdf", "n3.pdf"]


def test_duplicate_entry_names_are_suffixed(db_client, storage_client, download_service):
    db_client.documents["D1"] = make_document(
        "D1",
        papers=[
            make_paper("p1", title="scan", storage_reference="a"),
            make_paper("p2", title="scan", storage_reference="b"),
            make_paper("p3", title="scan", storage_reference="c"),
        ],
    )
    storage_client.objects.update({"a": b"A", "b": b"B", "c": b"C"})

    archive = asyncio.run(download_service.do_download("D1"))

    assert _names(archive.content) == ["scan.pdf", "scan_2.pdf", "scan_3.pdf"]
    assert _entries(archive.content) == {"scan.pdf": b"A", "scan_2.pdf": b"B", "scan_3.pdf": b"C"}


def test_untitled_paper_and_document_fall_back_to_ids(db_client, storage_client, download_service):
    db_client.documents["D9"] = make_document(
        "D9", title=None, papers=[make_paper("p1", title=None, file_type=None, storage_reference="x")]
    )
    storage_client.objects["x"] = b"raw"

    archive = asyncio.run(download_service.do_download("D9"))

    assert archive.filename == "document_D9.zip"
    assert _entries(archive.content) == {"paper_p1.txt": b"raw"}


def test_get_papers_returns_papers_in_order(document_service, db_client):
    db_client.documents["D1"] = make_document("D1", papers=[make_paper("p1")])

    papers = asyncio.run(document_service.get_papers("D1"))

    assert [paper.id for paper in papers] == ["p1"]


def test_titles_cannot_escape_the_archive_root(db_client, storage_client, download_service):
    db_client.documents["D1"] = make_document(
        "D1",
        papers=[
            make_paper("p1", title="../../evil", storage_reference="a"),
            make_paper("p2", title="C:\\temp\\x", storage_reference="b"),
            make_paper("p3", title="/etc/passwd", storage_reference=None),
        ],
    )
    storage_client.objects.update({"a": b"A", "b": b"B"})

    archive = asyncio.run(download_service.do_download("D1"))

    names = _names(archive.content)
    assert names == ["___.._evil.pdf", "C:_temp_x.pdf", "_etc_passwd.pdf"]
    assert all("/" not in name and "\\" not in name and not name.startswith(".") for name in names)


def test_papers_table_is_used_when_embedded_select_is_empty(db_client, storage_client, document_service, download_service):
    db_client.documents["D1"] = make_document("D1", papers=[])
    db_client.papers_table["D1"] = [make_paper("p1", title="judgement", storage_reference="a")]
    storage_client.objects["a"] = b"A"

    papers = asyncio.run(document_service.get_papers("D1"))
    archive = asyncio.run(download_service.do_download("D1"))

    assert [paper.id for paper in papers] == ["p1"]
    assert _entries(archive.content) == {"judgement.pdf": b"A"}
