"""File naming rules shared by the download endpoint and the downloader.

Saved archive names keep ASCII letters, digits and Arabic-script characters
(U+0600–U+06FF); everything else becomes "_".
"""

import re
from urllib.parse import quote

from shared.clients.db.models.Paper import PaperDetails

ARCHIVE_EXTENSION = "zip"
DEFAULT_ENTRY_EXTENSION = "txt"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9\u0600-\u06FF]")
_PATH_SEPARATORS = re.compile(r"[/\\]")
_LEADING_DOTS = re.compile(r"^\.+")


def sanitize_filename(value: str) -> str:
    """Replace every character outside [A-Za-z0-9] and the Arabic block with "_".

    Idempotent: sanitizing an already sanitized value returns it unchanged.

    Args:
        value (str): The raw name (e.g. a document title).

    Returns:
        str: The filesystem-safe name.
    """
    return _UNSAFE_CHARS.sub("_", value or "")


def build_archive_filename(title: str | None, document_id: str | None = None) -> str:
    """Build the "{title}.zip" file name for a document archive.

    Falls back to "document_{id}" when the document has no title.
    """
    base = title or (f"document_{document_id}" if document_id else "document")
    return f"{sanitize_filename(base)}.{ARCHIVE_EXTENSION}"


def safe_entry_stem(value: str) -> str:
    """Neutralize path syntax in an archive entry stem.

    Path separators and leading dots become "_", so an entry can never point
    outside the extraction directory (e.g. "../../evil" -> "___.._evil").
    """
    stem = _PATH_SEPARATORS.sub("_", value)
    return _LEADING_DOTS.sub(lambda match: "_" * len(match.group()), stem)


def build_entry_basename(paper: PaperDetails) -> str:
    """The entry name without extension: the path-safe paper title, or "paper_{id}"."""
    return safe_entry_stem(paper.title) if paper.title else f"paper_{paper.id}"


def build_entry_name(paper: PaperDetails) -> str:
    """Build the archive entry name "{title or paper_<id>}.{file_type or txt}".

    Args:
        paper (PaperDetails): The paper the entry is built for.

    Returns:
        str: The entry name.
    """
    extension = paper.file_type or DEFAULT_ENTRY_EXTENSION
    return f"{build_entry_basename(paper)}.{extension}"


def make_unique_name(name: str, taken: set[str]) -> str:
    """Return name, or name with "_2", "_3", ... inserted before the extension if already taken.

    The chosen name is added to taken.
    """
    candidate = name
    if candidate in taken:
        stem, dot, extension = name.rpartition(".")
        if not dot:
            stem, extension = name, ""
        counter = 2
        while candidate in taken:
            candidate = f"{stem}_{counter}.{extension}" if dot else f"{stem}_{counter}"
            counter += 1
    taken.add(candidate)
    return candidate


def build_content_disposition(filename: str) -> str:
    """Build an attachment Content-Disposition header value.

    HTTP headers are latin-1, so the plain filename parameter carries an
    ASCII-only fallback while filename* carries the UTF-8 name (RFC 6266).
    """
    ascii_fallback = filename.encode("ascii", "replace").decode("ascii").replace("?", "_").replace('"', "_")
    return f"attachment; filename=\"{ascii_fallback}\"; filename*=UTF-8''{quote(filename)}"
