"""
Media Staging

One object owning the whole staging subsystem: the virtual file registry,
the fetcher, the deletion queue and the upload orchestrator. Build one per
process (or use get_staging()) and share it.

Author: AI Creator Team
License: MIT
"""

import logging
import threading
from typing import Any, Dict, Iterable, Optional, Set, Union

from .config import StagingConfig
from .deletion import DeletionQueue
from .fetcher import Fetcher
from .limits import limit
from .registry import VirtualFileRegistry
from .uploader import EditHook, UploadOrchestrator

logger = logging.getLogger(__name__)


class MediaStaging:
    """Stages, edits, uploads and cleans up pictures for posts.

    Attributes:
        config: Settings this instance was built with
        registry: Namespace of staged files
        fetcher: Downloads and copies pictures into the registry
        deletion_queue: Deletes staged files, retrying failures
        orchestrator: Runs batches of pictures through fetch/edit/upload
    """

    def __init__(self, config: Optional[StagingConfig] = None):
        self.config = config or StagingConfig()
        self.registry = VirtualFileRegistry(self.config.file_prefix, self.config.temp_dir)
        self.fetcher = Fetcher(self.registry, self.config.http_timeout, self.config.chunk_size)
        self.deletion_queue = DeletionQueue(
            self.registry,
            retry_interval=self.config.retry_interval,
            poll_interval=self.config.poll_interval,
        )
        self.orchestrator = UploadOrchestrator(self.registry, self.fetcher, self.deletion_queue)
        logger.info(f"Media staging ready in {self.config.directory} (prefix: {self.registry.prefix})")

    def file(self, extension: str) -> str:
        """Create an empty staged file and return its virtual filename."""
        return self.registry.create(extension)

    def files(self) -> Set[str]:
        """Return every virtual filename currently staged."""
        return self.registry.list()

    def get(self, source: str) -> str:
        """Stage a local path or URI and return its virtual filename."""
        return self.fetcher.obtain(source)

    def edit(self, file_list: Union[str, Iterable[str]], edit_hook: EditHook) -> None:
        """Hand staged files' real paths to edit_hook."""
        self.orchestrator.edit(file_list, edit_hook)

    def upload(self, poster, virtual_filename: str, upload_options: Optional[Dict[str, Any]] = None) -> str:
        """Upload one staged file and return its media id."""
        return self.orchestrator.upload(poster, virtual_filename, upload_options)

    def delete(self, trash_files: Union[str, Iterable[str]] = ()) -> Set[str]:
        """Queue staged files for deletion; returns those still undeleted."""
        return self.deletion_queue.request_deletion(trash_files)

    def limit(self, *args: Any) -> int:
        return limit(*args)

    def process(
        self,
        bot,
        pic_list,
        upload_options: Optional[Dict[str, Any]] = None,
        edit_hook: Optional[EditHook] = None
    ) -> Dict[str, str]:
        """See UploadOrchestrator.process()."""
        return self.orchestrator.process(bot, pic_list, upload_options, edit_hook)

    def shutdown(self, timeout: Optional[float] = None) -> None:
        """Stop the deletion retry timer."""
        self.deletion_queue.shutdown(timeout)
        logger.info("Media staging shut down")

    def __enter__(self) -> 'MediaStaging':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()


_staging: Optional[MediaStaging] = None
_staging_lock = threading.Lock()


def get_staging() -> MediaStaging:
    """Return the process-wide MediaStaging, creating it from the environment."""
    global _staging
    with _staging_lock:
        if _staging is None:
            _staging = MediaStaging(StagingConfig.from_env())
        return _staging


def set_staging(instance: Optional[MediaStaging]) -> None:
    """Replace the process-wide MediaStaging (None resets it)."""
    global _staging
    with _staging_lock:
        _staging = instance
