"""
Archive Reader
==============

Reads image entries out of an in-memory ZIP archive.

Design Rules:
    - The archive is parsed once, entries are read on demand
    - An entry is returned as exactly its recorded uncompressed size
    - Missing entries and read failures map to EntryNotFoundError / ArchiveIOError
"""

import io
import logging
import zipfile
import zlib

from slideshow_video.errors import ArchiveIOError, EntryNotFoundError


logger = logging.getLogger(__name__)


class ArchiveReader:
    """
    Random-access reader over ZIP archive bytes.

    Example:
        reader = ArchiveReader(zip_bytes)
        data = reader.read_entry("001.png")
    """

    def __init__(self, archive_bytes: bytes) -> None:
        """
        Parse the archive's central directory.

        Args:
            archive_bytes: Complete ZIP file contents

        Raises:
            ArchiveIOError: If the bytes are not a readable ZIP archive
        """
        try:
            self._zip = zipfile.ZipFile(io.BytesIO(archive_bytes))
        except (zipfile.BadZipFile, OSError) as e:
            raise ArchiveIOError(f"Cannot open archive: {e}") from e

        logger.debug(f"Archive opened: {len(self._zip.infolist())} entries")

    def names(self) -> list:
        """Entry names in archive order."""
        return self._zip.namelist()

    def entry_size(self, filename: str) -> int:
        """Uncompressed size of an entry in bytes."""
        return self._info(filename).file_size

    def read_entry(self, filename: str) -> bytes:
        """
        Read one entry completely.

        Args:
            filename: Entry name inside the archive

        Returns:
            Entry bytes, exactly `entry_size(filename)` long

        Raises:
            EntryNotFoundError: If the archive has no such entry
            ArchiveIOError: If the entry cannot be read or is truncated
        """
        info = self._info(filename)
        try:
            with self._zip.open(info) as stream:
                data = stream.read(info.file_size)
        except (zipfile.BadZipFile, zlib.error, OSError, RuntimeError, EOFError) as e:
            raise ArchiveIOError(f"Cannot read entry '{filename}': {e}") from e

        if len(data) != info.file_size:
            raise ArchiveIOError(
                f"Short read on entry '{filename}': "
                f"expected {info.file_size} bytes, got {len(data)}"
            )
        return data

    def close(self) -> None:
        self._zip.close()

    def __enter__(self) -> "ArchiveReader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _info(self, filename: str) -> zipfile.ZipInfo:
        try:
            return self._zip.getinfo(filename)
        except KeyError:
            raise EntryNotFoundError(filename) from None
