"""
Graph API Poster

Posts to a Facebook Page through the Graph API. Pictures are uploaded
unpublished first, then attached to a feed post by id.

Author: AI Creator Team
License: MIT
"""

import json
import logging
from typing import Any, BinaryIO, Dict, List

import requests

from .base_poster import MediaPoster, Post, PostResult, retry_with_backoff

logger = logging.getLogger(__name__)

GRAPH_API_BASE = "https://graph.facebook.com"
REQUEST_TIMEOUT = 30


def _split_media_ids(options: Dict[str, Any]) -> List[str]:
    media_ids = options.pop('media_ids', '') or ''
    return [media_id for media_id in str(media_ids).split(',') if media_id]


class GraphAPIPoster(MediaPoster):
    """MediaPoster for a Facebook Page."""

    @property
    def base_url(self) -> str:
        return f"{GRAPH_API_BASE}/{self.config.api_version}"

    def _validate_credentials(self) -> None:
        if not self.config.page_id.isdigit():
            raise ValueError(f"page_id must be numeric, got '{self.config.page_id}'")

    @retry_with_backoff(max_retries=3, base_delay=2, retry_on=(requests.RequestException,))
    def upload(self, file_obj: BinaryIO, options: Dict[str, Any]) -> str:
        """Upload a photo with published=false and return its photo id.

        Connection errors and 5xx answers are retried; 4xx answers are not.

        Raises:
            RuntimeError: If the Graph API rejects the upload
            requests.RequestException: If the API stays unreachable or failing
        """
        file_obj.seek(0)
        data = {
            "access_token": self.config.access_token,
            "published": "false",
        }
        data.update({key: str(value) for key, value in (options or {}).items()})

        response = requests.post(
            f"{self.base_url}/{self.config.page_id}/photos",
            files={"source": file_obj},
            data=data,
            timeout=REQUEST_TIMEOUT,
        )

        if response.status_code >= 500:
            raise requests.HTTPError(
                f"Graph API error {response.status_code}: {response.text}", response=response
            )
        if not response.ok:
            raise RuntimeError(f"Graph API error {response.status_code}: {response.text}")

        result = response.json()
        photo_id = result.get('id')
        if not photo_id:
            raise RuntimeError(f"No photo ID returned from upload: {result}")

        logger.info(f"Photo uploaded successfully. Photo ID: {photo_id}")
        return str(photo_id)

    def _post(self, endpoint: str, data: Dict[str, Any]) -> PostResult:
        data["access_token"] = self.config.access_token
        try:
            response = requests.post(f"{self.base_url}/{endpoint}", data=data, timeout=REQUEST_TIMEOUT)
        except requests.exceptions.RequestException as e:
            logger.error(f"Network error posting to {endpoint}: {e}")
            return PostResult(success=False, error_message=str(e))

        if not response.ok:
            logger.error(f"Graph API error {response.status_code}: {response.text}")
            return PostResult(success=False, error_message=response.text)

        result = response.json()
        logger.info(f"Successfully posted to {endpoint}. Post ID: {result.get('id')}")
        return PostResult(success=True, post_id=result.get('id'), metadata=result)

    def create_post(self, text: str, options: Dict[str, Any]) -> PostResult:
        """Publish a feed post with any staged photos attached."""
        options = dict(options or {})
        media_ids = _split_media_ids(options)

        data: Dict[str, Any] = {"message": text}
        for index, media_id in enumerate(media_ids):
            data[f"attached_media[{index}]"] = json.dumps({"media_fbid": media_id})
        data.update(options)

        return self._post(f"{self.config.page_id}/feed", data)

    def reply(self, target: Post, text: str, options: Dict[str, Any]) -> PostResult:
        """Comment on a post. Comments carry at most one photo, the first one."""
        options = dict(options or {})
        media_ids = _split_media_ids(options)

        data: Dict[str, Any] = {"message": text}
        if media_ids:
            if len(media_ids) > 1:
                logger.warning(f"Comments take one photo; dropping {len(media_ids) - 1}")
            data["attachment_id"] = media_ids[0]
        data.update(options)

        return self._post(f"{target.id}/comments", data)
