"""
Reader for the ZIP bundle of example source files included into wiki pages.
"""
import logging
import zipfile
from pathlib import Path
from typing import Optional, Sequence

from .exceptions import BundleUnavailableError
from .protocols import BundleEntry

logger = logging.getLogger(__name__)


class ZipExampleBundle:
    """
    Looks up example sources in a ZIP archive by path suffix.

    The archive is located lazily on first lookup: the first existing path out
    of ``candidates`` wins (the deployed location first, then local
    development fallbacks). The archive is reopened for every lookup, so one
    instance can be shared between build threads.
    """

    def __init__(self, candidates: Sequence[Path]):
        """
        Args:
            candidates: Possible archive locations, in order of preference
        """
        self.candidates = [Path(candidate) for candidate in candidates]

    def locate(self) -> Path:
        for candidate in self.candidates:
            if candidate.is_file():
                return candidate
        searched = ", ".join(str(c.absolute()) for c in self.candidates) or "<none>"
        raise BundleUnavailableError(f"ZIP file with example sources not found (searched: {searched})")

    def find_by_suffix(self, path: str) -> Optional[BundleEntry]:
        """
        Find the first archive entry whose name ends with ``path``.

        Args:
            path: Path suffix to look for, e.g. ``lz77/LZ77Codeword.java``

        Returns:
            Matching entry with its UTF-8 decoded contents, or None

        Raises:
            BundleUnavailableError: If the archive is missing or unreadable
        """
        archive = self.locate()

        try:
            with zipfile.ZipFile(archive) as zip_file:
                for info in zip_file.infolist():
                    if info.is_dir() or not info.filename.endswith(path):
                        continue
                    logger.debug(f"Resolved include '{path}' to '{info.filename}'")
                    contents = zip_file.read(info).decode('utf-8')
                    return BundleEntry(name=info.filename, contents=contents)
        except (OSError, zipfile.BadZipFile, UnicodeDecodeError) as e:
            raise BundleUnavailableError(f"Cannot load the file: {archive.absolute()}") from e

        return None
