"""
Virtual File Registry

Maps virtual filenames ("7.jpg") to real temporary files on disk. Callers
only ever hold the virtual name; the backing path stays inside the staging
subsystem.

Author: AI Creator Team
License: MIT
"""

import logging
import os
import tempfile
import threading
import time
from dataclasses import dataclass
from typing import Dict, Optional, Set

from .errors import NoSuchFileError
from .filetypes import canonicalize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VirtualFile:
    """A staged file awaiting use.

    Attributes:
        id: Process-unique id, never reused
        extension: Canonical extension, e.g. ".png"
        backing_path: Real temporary file owned by this entry
    """
    id: int
    extension: str
    backing_path: str

    @property
    def name(self) -> str:
        """Virtual filename handed out to callers."""
        return f"{self.id}{self.extension}"


class VirtualFileRegistry:
    """Namespace of staged files, safe to share between threads.

    Attributes:
        directory: Directory backing files are created in
        prefix: Per-registry prefix making backing filenames traceable
    """

    def __init__(self, file_prefix: str = 'tweet-pic', directory: Optional[str] = None):
        self.directory = directory
        self.prefix = f"{file_prefix}-{str(time.time()).replace('.', '-')}"
        self._files: Dict[str, VirtualFile] = {}
        self._next_id = 1
        self._lock = threading.RLock()

    def create(self, extension: str) -> str:
        """Create an empty backing file and register it.

        Args:
            extension: Extension or content-type of the file to create

        Returns:
            New virtual filename

        Raises:
            FiletypeError: If the extension isn't supported (no id is consumed)
        """
        canonical = canonicalize(extension)

        with self._lock:
            file_id = self._next_id
            fd, backing_path = tempfile.mkstemp(
                prefix=f"{self.prefix}-{file_id}-",
                suffix=canonical,
                dir=self.directory,
            )
            os.close(fd)
            self._next_id += 1

            entry = VirtualFile(file_id, canonical, backing_path)
            self._files[entry.name] = entry

        logger.debug(f"Created {entry.name} at {backing_path}")
        return entry.name

    def list(self) -> Set[str]:
        """Return all currently registered virtual filenames."""
        with self._lock:
            return set(self._files)

    def get(self, virtual_filename: str) -> VirtualFile:
        """Return the registry entry for a virtual filename.

        Raises:
            NoSuchFileError: If the name is not registered
        """
        with self._lock:
            try:
                return self._files[virtual_filename]
            except KeyError:
                raise NoSuchFileError(f"{virtual_filename} doesn't exist") from None

    def resolve(self, virtual_filename: str) -> str:
        """Return the backing path of a virtual filename.

        Raises:
            NoSuchFileError: If the name is not registered
        """
        return self.get(virtual_filename).backing_path

    def remove(self, virtual_filename: str) -> None:
        """Delete the backing file and drop the entry.

        A backing file that is already gone counts as deleted. Any other
        failure leaves the entry registered and propagates.

        Raises:
            NoSuchFileError: If the name is not registered
            OSError: If the backing file could not be deleted
        """
        with self._lock:
            entry = self.get(virtual_filename)
            try:
                os.remove(entry.backing_path)
            except FileNotFoundError:
                logger.debug(f"Backing file for {virtual_filename} was already gone")
            del self._files[virtual_filename]

        logger.debug(f"Removed {virtual_filename}")

    def __contains__(self, virtual_filename: object) -> bool:
        with self._lock:
            return virtual_filename in self._files

    def __len__(self) -> int:
        with self._lock:
            return len(self._files)
