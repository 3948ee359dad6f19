"""
Picture Staging Module

Stages pictures from local paths or URLs, lets a bot edit them, uploads them
through a poster and cleans up afterwards, attaching at most four per post.

Author: AI Creator Team
License: MIT
"""

from .errors import (
    MediaStagingError,
    FiletypeError,
    HTTPResponseError,
    EmptyFileError,
    NoSuchFileError,
    NoUploadedFilesError,
)
from .filetypes import SUPPORTED_FILETYPES, canonicalize
from .limits import MEDIA_LIMIT, limit
from .config import StagingConfig, configure_logging
from .registry import VirtualFile, VirtualFileRegistry
from .fetcher import Fetcher
from .deletion import DeletionQueue
from .uploader import ItemResult, UploadOrchestrator
from .staging import MediaStaging, get_staging, set_staging
from .base_poster import MediaPoster, PlatformConfig, PostResult, Post, DirectMessage
from .graph_poster import GraphAPIPoster
from .image_processor import ImageProcessor
from .bot import PicBot

__all__ = [
    'MediaStagingError',
    'FiletypeError',
    'HTTPResponseError',
    'EmptyFileError',
    'NoSuchFileError',
    'NoUploadedFilesError',
    'SUPPORTED_FILETYPES',
    'canonicalize',
    'MEDIA_LIMIT',
    'limit',
    'StagingConfig',
    'configure_logging',
    'VirtualFile',
    'VirtualFileRegistry',
    'Fetcher',
    'DeletionQueue',
    'ItemResult',
    'UploadOrchestrator',
    'MediaStaging',
    'get_staging',
    'set_staging',
    'MediaPoster',
    'PlatformConfig',
    'PostResult',
    'Post',
    'DirectMessage',
    'GraphAPIPoster',
    'ImageProcessor',
    'PicBot',
]
