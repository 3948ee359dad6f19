"""
Upload Orchestrator

Turns a list of pictures into media ids for a post: each picture is staged,
handed to the caller's edit hook, uploaded through the poster and queued for
deletion. A failing picture is skipped; the batch only fails when nothing
could be uploaded.

Author: AI Creator Team
License: MIT
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from .deletion import DeletionQueue
from .errors import EmptyFileError, NoSuchFileError, NoUploadedFilesError
from .fetcher import Fetcher
from .limits import limit
from .registry import VirtualFileRegistry

logger = logging.getLogger(__name__)

EditHook = Callable[[str], Any]


@dataclass
class ItemResult:
    """Outcome of staging and uploading one picture.

    Attributes:
        source: Path or URI as given by the caller
        media_id: Id returned by the poster (if successful)
        error: Exception that stopped this picture (if failed)
    """
    source: str
    media_id: Optional[str] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.media_id is not None


class UploadOrchestrator:
    """Drives fetch, edit, upload and cleanup for a batch of pictures."""

    def __init__(self, registry: VirtualFileRegistry, fetcher: Fetcher, deletion_queue: DeletionQueue):
        self.registry = registry
        self.fetcher = fetcher
        self.deletion_queue = deletion_queue

    def edit(self, file_list: Union[str, Iterable[str]], edit_hook: EditHook) -> None:
        """Hand the real paths of staged files to an edit hook.

        Args:
            file_list: Virtual filename(s) to edit
            edit_hook: Called once with each file's real path

        Raises:
            TypeError: If edit_hook isn't callable
            NoSuchFileError: If none of the files exist
        """
        if not callable(edit_hook):
            raise TypeError("edit() requires a callable edit hook")

        if isinstance(file_list, str):
            file_list = [file_list]

        known = self.registry.list()
        names = [name for name in file_list if name in known]
        if not names:
            raise NoSuchFileError("Files don't exist")

        for name in names:
            edit_hook(self.registry.resolve(name))

    def upload(self, poster, virtual_filename: str, upload_options: Optional[Dict[str, Any]] = None) -> str:
        """Upload a staged file through the poster.

        Args:
            poster: Object exposing upload(file_obj, options) -> media id
            virtual_filename: Staged file to upload
            upload_options: Options passed along to the poster

        Returns:
            Media id from the poster

        Raises:
            NoSuchFileError: If the file isn't staged
            EmptyFileError: If the file is empty
        """
        path = self.registry.resolve(virtual_filename)
        if os.path.getsize(path) == 0:
            raise EmptyFileError(f"{virtual_filename} is empty")

        with open(path, 'rb') as file_obj:
            media_id = poster.upload(file_obj, dict(upload_options or {}))

        logger.debug(f"Uploaded {virtual_filename} as media {media_id}")
        return media_id

    def _process_one(self, poster, source: Any, upload_options: Dict[str, Any], edit_hook: Optional[EditHook]) -> ItemResult:
        source_path = str(source)
        virtual_filename = None

        try:
            virtual_filename = self.fetcher.obtain(source_path)
            if edit_hook is not None:
                self.edit([virtual_filename], edit_hook)
            media_id = self.upload(poster, virtual_filename, upload_options)
        except Exception as e:
            logger.warning(f"Skipping {source_path}: {type(e).__name__}: {e}")
            # Only this picture's own file; other batches may be staging concurrently
            staged = virtual_filename or getattr(e, 'virtual_filename', None)
            if staged:
                self.deletion_queue.request_deletion([staged])
            return ItemResult(source_path, error=e)

        self.deletion_queue.request_deletion([virtual_filename])
        return ItemResult(source_path, media_id=media_id)

    def process(
        self,
        bot,
        pic_list: Union[str, Iterable[Any]],
        upload_options: Optional[Dict[str, Any]] = None,
        edit_hook: Optional[EditHook] = None
    ) -> Dict[str, str]:
        """Get the media ids parameter ready for a post.

        Pictures are tried in order; the first limit() that upload
        successfully are used and the rest are never attempted.

        Args:
            bot: Object exposing a `poster` attribute and a log(message) method
            pic_list: Paths or URIs to upload, or a single one
            upload_options: Options passed along with every upload
            edit_hook: Called with each staged file's real path before upload

        Returns:
            {"media_ids": "<comma-joined ids>"}, or {} for an empty pic_list

        Raises:
            NoUploadedFilesError: If none of the pictures could be uploaded
        """
        if isinstance(pic_list, (str, bytes)) or not hasattr(pic_list, '__iter__'):
            pic_list = [pic_list]
        pic_list = list(pic_list)

        if pic_list == [] or pic_list == ['']:
            return {}

        upload_options = upload_options or {}
        results: List[ItemResult] = []
        successes: List[ItemResult] = []

        for source in pic_list:
            if limit(successes) >= 0:
                break

            result = self._process_one(bot.poster, source, upload_options, edit_hook)
            results.append(result)
            if result.ok:
                successes.append(result)

        if not successes:
            raise NoUploadedFilesError(
                f"None of the {len(results)} picture(s) provided could be uploaded."
            )

        # Early stop above should make this a no-op
        successes = successes[:limit()]

        bot.log(f"Uploaded: {' '.join(result.source for result in successes)}")

        return {'media_ids': ','.join(str(result.media_id) for result in successes)}
