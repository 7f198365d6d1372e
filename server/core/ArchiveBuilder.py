"""In-memory ZIP assembly for document downloads."""

import zipfile
from io import BytesIO

from server.models.archive import ArchiveEntry
from server.models.errors import ArchiveAssemblyError


class ArchiveBuilder:
    """Encodes an ordered list of entries into one deflated ZIP buffer.

    Entry names are written as given, in input order. Name uniqueness is the
    caller's concern.
    """

    def __init__(self, compression: int = zipfile.ZIP_DEFLATED) -> None:
        self._compression = compression

    def build(self, entries: list[ArchiveEntry]) -> bytes:
        """Build the archive.

        Args:
            entries (list[ArchiveEntry]): Zero or more entries.

        Returns:
            bytes: A valid ZIP archive (an empty one for zero entries).

        Raises:
            ArchiveAssemblyError: If the encoder fails.
        """
        buffer = BytesIO()
        try:
            with zipfile.ZipFile(buffer, "w", self._compression) as zip_file:
                for entry in entries:
                    zip_file.writestr(entry.name, entry.content)
        except (zipfile.LargeZipFile, ValueError, OSError, RuntimeError) as e:
            raise ArchiveAssemblyError() from e
        return buffer.getvalue()
