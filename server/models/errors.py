"""Errors that cross the HTTP boundary of the archive API.

Each error carries the status code and the localized message rendered as
{"message": ...} by the exception handler in server.api_server.
"""

MESSAGE_DOCUMENT_NOT_FOUND = "الوثيقة غير موجودة"
MESSAGE_DOCUMENT_EMPTY = "الوثيقة فارغة"
MESSAGE_DOWNLOAD_FAILED = "خطأ في تحميل الوثيقة"
MESSAGE_UNAUTHORIZED = "مفتاح الوصول غير صالح"


class ArchiveServiceError(Exception):
    status_code: int = 500
    default_message: str = MESSAGE_DOWNLOAD_FAILED

    def __init__(self, message: str | None = None, document_id: str | None = None) -> None:
        self.message = message or self.default_message
        self.document_id = document_id
        super().__init__(self.message)


class DocumentNotFoundError(ArchiveServiceError):
    status_code = 404
    default_message = MESSAGE_DOCUMENT_NOT_FOUND


class EmptyDocumentError(ArchiveServiceError):
    status_code = 400
    default_message = MESSAGE_DOCUMENT_EMPTY


class ArchiveAssemblyError(ArchiveServiceError):
    status_code = 500
    default_message = MESSAGE_DOWNLOAD_FAILED


class DownloadFailedError(ArchiveServiceError):
    status_code = 500
    default_message = MESSAGE_DOWNLOAD_FAILED
