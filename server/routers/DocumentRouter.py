from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from server.dependencies.auth import verify_api_key
from server.models.errors import ArchiveServiceError, DownloadFailedError
from server.models.responses import DocumentResponse, ErrorResponse, PapersResponse
from shared.helper.HelperFilename import build_content_disposition

ARCHIVE_MEDIA_TYPE = "application/zip"

router = APIRouter(
    prefix="/api/documents",
    tags=["documents"],
    dependencies=[Depends(verify_api_key)],
    responses={
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


@router.get("/{document_id}")
async def get_document(request: Request, document_id: str) -> DocumentResponse:
    """Return a document with its papers.

    Args:
        request (Request): FastAPI request (provides app.state.document_service).
        document_id (str): The document ID from the path.

    Returns:
        DocumentResponse: The document and its paper count.
    """
    document = await request.app.state.document_service.get_document_with_papers(document_id)
    return DocumentResponse(document=document, paper_count=len(document.papers))


@router.get("/{document_id}/papers")
async def get_document_papers(request: Request, document_id: str) -> PapersResponse:
    """Return the papers attached to a document."""
    papers = await request.app.state.document_service.get_papers(document_id)
    return PapersResponse(document_id=document_id, papers=papers, total=len(papers))


@router.post(
    "/{document_id}/download",
    response_class=Response,
    responses={
        200: {"content": {ARCHIVE_MEDIA_TYPE: {}}},
        400: {"model": ErrorResponse},
    },
)
async def download_document(request: Request, document_id: str) -> Response:
    """Bundle all papers of a document into a ZIP archive.

    Any request body is ignored. Papers whose file cannot be fetched are
    replaced by a text placeholder inside the archive.

    Args:
        request (Request): FastAPI request (provides app.state.download_service).
        document_id (str): The document ID from the path.

    Returns:
        Response: The archive as an attachment named after the document title.

    Raises:
        DocumentNotFoundError: 404 if the document does not exist.
        EmptyDocumentError: 400 if the document has no papers.
        DownloadFailedError: 500 on any other failure.
    """
    download_service = request.app.state.download_service
    try:
        archive = await download_service.do_download(document_id)
    except ArchiveServiceError:
        raise
    except Exception as exc:
        request.app.state.logging.error("Download of document %s failed: %s", document_id, exc)
        raise DownloadFailedError(document_id=document_id) from exc

    return Response(
        content=archive.content,
        media_type=ARCHIVE_MEDIA_TYPE,
        headers={
            "Content-Disposition": build_content_disposition(archive.filename),
            "Content-Length": str(len(archive.content)),
        },
    )
