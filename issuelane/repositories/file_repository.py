"""
File Repository.

Object storage uploads for ticket attachments plus the ``files`` table
that records each stored object's public URL and MIME type.
"""

from __future__ import annotations

from issuelane.database import DatabaseManager
from issuelane.logger import StructuredLogger
from issuelane.repositories.base_repository import BaseRepository, RepositoryError


class FileRepository(BaseRepository):
    """Data access layer for attachments.

    Parameters
    ----------
    db:
        Shared ``DatabaseManager``.
    logger:
        A ``StructuredLogger`` instance.
    bucket:
        Supabase storage bucket holding attachment objects.
    """

    TABLE = "files"

    def __init__(
        self, db: DatabaseManager, logger: StructuredLogger, bucket: str
    ) -> None:
        super().__init__(db, logger)
        self._bucket = bucket

    # -- Object storage ------------------------------------------------------

    def upload(self, path: str, content: bytes, content_type: str) -> None:
        def _op() -> None:
            self.supabase.storage.from_(self._bucket).upload(
                path, content, {"content-type": content_type}
            )

        self._execute(_op, operation_name="upload (storage)")
        self._logger.info("Uploaded attachment: %s/%s", self._bucket, path)

    def public_url(self, path: str) -> str:
        def _op() -> str:
            url = self.supabase.storage.from_(self._bucket).get_public_url(path)
            if not url:
                raise RepositoryError("public_url (storage)", "empty URL")
            return str(url)

        return self._execute(_op, operation_name="public_url (storage)")

    def remove_object(self, path: str) -> None:
        def _op() -> None:
            self.supabase.storage.from_(self._bucket).remove([path])

        self._execute(_op, operation_name="remove (storage)")

    # -- files table ---------------------------------------------------------

    def insert(self, url: str, mime_type: str) -> int:
        """Record an uploaded object; returns the new ``file_id``."""
        def _op() -> int:
            response = (
                self.supabase.table(self.TABLE)
                .insert({"url": url, "type": mime_type})
                .execute()
            )
            row = self._first_row(response)
            if not row or row.get("file_id") is None:
                raise RepositoryError("insert (files)", "no file_id returned")
            return int(row["file_id"])

        return self._execute(_op, operation_name="insert (files)")

    def delete(self, file_id: int) -> None:
        def _op() -> None:
            self.supabase.table(self.TABLE).delete().eq("file_id", file_id).execute()

        self._execute(_op, operation_name="delete (files)")
