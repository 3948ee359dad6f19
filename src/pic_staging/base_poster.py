"""
Base Media Poster

Abstract base class for the services pictures are uploaded and posted
through. The staging subsystem only needs upload(); the bot also creates
posts and replies with it.

Design Choices:
- ABC keeps the interface consistent across platforms
- Dataclasses for configuration and results
- Retry decorator shared by network-bound implementations

Author: AI Creator Team
License: MIT
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Dict, Any, Callable, BinaryIO, Tuple, Type
import logging
import time
from functools import wraps

logger = logging.getLogger(__name__)


@dataclass
class PlatformConfig:
    """Configuration for a posting platform.

    Attributes:
        access_token: Platform API access token
        page_id: Page/account ID posts are made as
        api_version: Graph API version used in request URLs
    """
    access_token: str
    page_id: str
    api_version: str = "v23.0"

    def __post_init__(self) -> None:
        """Validate configuration on initialization."""
        if not self.access_token or not self.access_token.strip():
            raise ValueError("access_token cannot be empty")
        if not self.page_id or not self.page_id.strip():
            raise ValueError("page_id cannot be empty")


@dataclass
class PostResult:
    """Result of a post operation.

    Attributes:
        success: Whether the post succeeded
        post_id: Platform-specific post ID (if successful)
        error_message: Error description (if failed)
        metadata: Additional platform-specific data
    """
    success: bool
    post_id: Optional[str] = None
    error_message: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


@dataclass
class Post:
    """A published post that can be replied to."""
    id: str
    text: str = ""


@dataclass
class DirectMessage:
    """A private message. Pictures can't be posted in reply to one."""
    id: str
    sender_id: str = ""
    text: str = ""


def retry_with_backoff(
    max_retries: int = 3,
    base_delay: int = 1,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,)
):
    """Decorator for automatic retry with exponential backoff.

    Args:
        max_retries: Maximum number of attempts
        base_delay: Base delay in seconds (doubles each retry)
        retry_on: Exception types worth retrying; anything else is raised at once

    Returns:
        Decorated function with retry logic

    Example:
        @retry_with_backoff(max_retries=3)
        def upload(self, file_obj, options):
            return requests.post(url, files={"source": file_obj})
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            last_exception = None

            for attempt in range(max_retries):
                try:
                    return func(*args, **kwargs)

                except retry_on as e:
                    last_exception = e

                    if attempt == max_retries - 1:
                        break

                    wait_time = base_delay * (2 ** attempt)

                    logger.warning(
                        f"{func.__name__} failed (attempt {attempt + 1}/{max_retries}): {e}. "
                        f"Retrying in {wait_time}s..."
                    )
                    time.sleep(wait_time)

            logger.error(f"{func.__name__} failed after {max_retries} attempts: {last_exception}")
            raise last_exception

        return wrapper
    return decorator


class MediaPoster(ABC):
    """Abstract base class for posting platforms.

    Subclasses must implement:
    - upload()
    - create_post()
    - reply()
    - _validate_credentials()
    """

    def __init__(self, config: PlatformConfig):
        """Initialize poster with platform configuration.

        Raises:
            ValueError: If configuration is invalid
        """
        self.config = config
        self._validate_credentials()
        logger.info(f"{self.__class__.__name__} initialized for page: {config.page_id}")

    @abstractmethod
    def upload(self, file_obj: BinaryIO, options: Dict[str, Any]) -> str:
        """Upload a picture without publishing it.

        Args:
            file_obj: Open binary file to upload
            options: Platform-specific upload options

        Returns:
            Media id to attach to a later post

        Raises:
            RuntimeError: If the upload fails
        """
        pass

    @abstractmethod
    def create_post(self, text: str, options: Dict[str, Any]) -> PostResult:
        """Publish a post. options may carry "media_ids" from the staging subsystem."""
        pass

    @abstractmethod
    def reply(self, target: Post, text: str, options: Dict[str, Any]) -> PostResult:
        """Reply to a post. options may carry "media_ids" from the staging subsystem."""
        pass

    @abstractmethod
    def _validate_credentials(self) -> None:
        """Validate platform credentials.

        Raises:
            ValueError: If credentials are invalid
        """
        pass

    def get_platform_name(self) -> str:
        """Get the name of this platform (e.g. "GraphAPI")."""
        return self.__class__.__name__.replace("Poster", "")
