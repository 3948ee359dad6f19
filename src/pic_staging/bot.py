"""
Picture Bot

Bot-side entry points for posting with pictures. The bot holds a poster and
a MediaStaging and calls into the staging subsystem explicitly.

Author: AI Creator Team
License: MIT
"""

import logging
from typing import Any, Dict, Iterable, Optional, Union

from .base_poster import DirectMessage, MediaPoster, Post, PostResult
from .errors import NoUploadedFilesError
from .staging import MediaStaging, get_staging
from .uploader import EditHook

logger = logging.getLogger(__name__)

PicList = Union[str, Iterable[Any]]


class PicBot:
    """Posts text with up to limit() pictures attached.

    Attributes:
        name: Bot name used in log lines
        poster: Platform the bot posts to
        staging: Staging subsystem pictures go through
    """

    def __init__(self, name: str, poster: MediaPoster, staging: Optional[MediaStaging] = None):
        self.name = name
        self.poster = poster
        self.staging = staging or get_staging()

    def log(self, message: str) -> None:
        logger.info(f"@{self.name}: {message}")

    def post(self, text: str, post_options: Optional[Dict[str, Any]] = None) -> PostResult:
        self.log(f"Posting '{text}'")
        return self.poster.create_post(text, dict(post_options or {}))

    def reply(self, target: Post, text: str, post_options: Optional[Dict[str, Any]] = None) -> PostResult:
        self.log(f"Replying to {target.id} with '{text}'")
        return self.poster.reply(target, text, dict(post_options or {}))

    def pic_post(
        self,
        text: str,
        pic_list: PicList,
        post_options: Optional[Dict[str, Any]] = None,
        upload_options: Optional[Dict[str, Any]] = None,
        edit_hook: Optional[EditHook] = None
    ) -> PostResult:
        """Post text with pictures.

        Any number of pictures can be given; the first limit() to upload
        successfully are attached.

        Args:
            text: Text content of the post
            pic_list: Paths, URIs or bare extensions (".png") of pictures
            post_options: Options passed along with the post
            upload_options: Options passed while uploading pictures
            edit_hook: Called with each picture's real path before upload

        Returns:
            PostResult from the poster

        Raises:
            NoUploadedFilesError: If no picture could be uploaded
        """
        post_options = dict(post_options or {})
        post_options.update(self.staging.process(self, pic_list, upload_options, edit_hook))
        return self.post(text, post_options)

    def pic_reply(
        self,
        target: Union[Post, DirectMessage],
        text: str,
        pic_list: PicList,
        post_options: Optional[Dict[str, Any]] = None,
        upload_options: Optional[Dict[str, Any]] = None,
        edit_hook: Optional[EditHook] = None
    ) -> PostResult:
        """Reply to a post with pictures. Does not work with direct messages.

        Raises:
            ValueError: If target is a direct message
            NoUploadedFilesError: If no picture could be uploaded
        """
        if isinstance(target, DirectMessage):
            raise ValueError("target can't be a direct message")

        post_options = dict(post_options or {})
        post_options.update(self.staging.process(self, pic_list, upload_options, edit_hook))
        return self.reply(target, text, post_options)

    def if_has_pic_reply(
        self,
        target: Union[Post, DirectMessage],
        text: str,
        pic_list: PicList,
        post_options: Optional[Dict[str, Any]] = None,
        upload_options: Optional[Dict[str, Any]] = None,
        edit_hook: Optional[EditHook] = None
    ) -> PostResult:
        """Like pic_reply(), but replies with text only when no picture could be uploaded.

        Only NoUploadedFilesError is suppressed; other errors propagate.
        """
        try:
            return self.pic_reply(target, text, pic_list, post_options, upload_options, edit_hook)
        except NoUploadedFilesError:
            self.log("No pictures could be uploaded, replying without them")
            return self.reply(target, text, post_options)
