"""
Staging Configuration

Environment-based settings for the media staging subsystem.

Design Choices:
- Values come from environment variables, optionally loaded from a .env file
- Dataclass validates itself on construction, like PlatformConfig

Author: AI Creator Team
License: MIT
"""

import logging
import os
import tempfile
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = 'tweet-pic'
DEFAULT_RETRY_SECONDS = 60
DEFAULT_POLL_SECONDS = 1.0
DEFAULT_HTTP_TIMEOUT = 30
DEFAULT_CHUNK_SIZE = 8192

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


@dataclass
class StagingConfig:
    """Settings for a MediaStaging instance.

    Attributes:
        file_prefix: Prefix for backing temporary filenames
        temp_dir: Directory for backing files (system temp dir if None)
        retry_interval: Seconds between deletion retries
        poll_interval: Seconds between checks of the retry scheduler
        http_timeout: Timeout in seconds for downloads
        chunk_size: Bytes per chunk when streaming downloads to disk
        log_level: Level name used by configure_logging()
    """
    file_prefix: str = DEFAULT_PREFIX
    temp_dir: Optional[str] = None
    retry_interval: int = DEFAULT_RETRY_SECONDS
    poll_interval: float = DEFAULT_POLL_SECONDS
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    chunk_size: int = DEFAULT_CHUNK_SIZE
    log_level: str = field(default='INFO')

    def __post_init__(self) -> None:
        """Validate configuration on initialization."""
        if not self.file_prefix or not self.file_prefix.strip():
            raise ValueError("file_prefix cannot be empty")
        if self.retry_interval <= 0:
            raise ValueError("retry_interval must be positive")
        if self.poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        if self.http_timeout <= 0:
            raise ValueError("http_timeout must be positive")
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if self.temp_dir and not os.path.isdir(self.temp_dir):
            raise ValueError(f"temp_dir does not exist: {self.temp_dir}")

    @property
    def directory(self) -> str:
        """Directory backing files are created in."""
        return self.temp_dir or tempfile.gettempdir()

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> 'StagingConfig':
        """Build configuration from environment variables.

        Args:
            dotenv_path: Optional .env file to load first (searched for if None)

        Returns:
            Validated StagingConfig

        Raises:
            ValueError: If a variable holds an invalid value
        """
        load_dotenv(dotenv_path)

        config = cls(
            file_prefix=os.getenv('PIC_STAGING_PREFIX', DEFAULT_PREFIX),
            temp_dir=os.getenv('PIC_STAGING_TEMP_DIR') or None,
            retry_interval=int(os.getenv('PIC_STAGING_RETRY_SECONDS', DEFAULT_RETRY_SECONDS)),
            poll_interval=float(os.getenv('PIC_STAGING_POLL_SECONDS', DEFAULT_POLL_SECONDS)),
            http_timeout=float(os.getenv('PIC_STAGING_HTTP_TIMEOUT', DEFAULT_HTTP_TIMEOUT)),
            chunk_size=int(os.getenv('PIC_STAGING_CHUNK_SIZE', DEFAULT_CHUNK_SIZE)),
            log_level=os.getenv('PIC_STAGING_LOG_LEVEL', 'INFO').upper(),
        )
        logger.debug(f"Loaded staging config from environment: {config}")
        return config


def configure_logging(level: str = 'INFO') -> None:
    """Set up root logging the way the posting scripts do.

    Args:
        level: Logging level name, e.g. "INFO" or "DEBUG"
    """
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)

    # Suppress verbose HTTP request logs
    logging.getLogger("urllib3").setLevel(logging.WARNING)
