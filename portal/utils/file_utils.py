"""
File upload utilities for image validation and object storage key generation.
"""

import io
import uuid
from pathlib import Path
from typing import Tuple
from PIL import Image, UnidentifiedImageError
from fastapi import UploadFile

from portal.config import settings
from portal.utils.exceptions import (
    FileUploadError,
    UnsupportedFileTypeError,
    FileSizeExceededError
)


class FileValidator:
    """Utility class for uploaded image validation."""

    # Supported image formats and their extensions
    SUPPORTED_FORMATS = {
        'image/jpeg': ['.jpg', '.jpeg'],
        'image/png': ['.png'],
        'image/webp': ['.webp']
    }

    # Pillow format name expected for each MIME type
    PIL_FORMATS = {
        'image/jpeg': 'jpeg',
        'image/png': 'png',
        'image/webp': 'webp'
    }

    @classmethod
    def validate_mime_type(cls, mime_type: str) -> str:
        """
        Raises:
            UnsupportedFileTypeError: If the MIME type is not an accepted image type
        """
        if mime_type not in settings.allowed_file_types or mime_type not in cls.SUPPORTED_FORMATS:
            raise UnsupportedFileTypeError(mime_type or "unknown", settings.allowed_file_types)
        return mime_type

    @classmethod
    def validate_file_size(cls, file_size: int) -> int:
        """
        Raises:
            FileUploadError: If the file is empty
            FileSizeExceededError: If the file is larger than the configured limit
        """
        if file_size <= 0:
            raise FileUploadError("File is empty")

        if file_size > settings.max_file_size:
            raise FileSizeExceededError(file_size, settings.max_file_size)

        return file_size

    @classmethod
    def validate_image_content(cls, content: bytes, mime_type: str) -> Tuple[int, int]:
        """
        Open the bytes with Pillow and check the decoded format matches the declared type.

        Returns:
            Tuple of (width, height)
        """
        try:
            with Image.open(io.BytesIO(content)) as img:
                pil_format = img.format.lower() if img.format else ""
                width, height = img.size
        except (UnidentifiedImageError, OSError) as e:
            raise FileUploadError(f"Invalid image file: {str(e)}")

        if pil_format != cls.PIL_FORMATS[mime_type]:
            raise FileUploadError(
                f"Image format '{pil_format}' doesn't match MIME type '{mime_type}'"
            )

        return width, height

    @classmethod
    async def read_upload(cls, file: UploadFile) -> Tuple[bytes, str]:
        """
        Validate an uploaded image and return its content and MIME type.

        Raises:
            FileUploadError, UnsupportedFileTypeError, FileSizeExceededError
        """
        if not file.filename:
            raise FileUploadError("Filename is required")

        mime_type = cls.validate_mime_type(file.content_type or "")

        content = await file.read()
        cls.validate_file_size(len(content))
        cls.validate_image_content(content, mime_type)

        return content, mime_type


def generate_storage_key(filename: str, mime_type: str, prefix: str = "properties") -> str:
    """
    Build a collision-free object key such as ``properties/<hex>.jpg``.

    The extension comes from the original filename when it matches the MIME
    type, otherwise the canonical extension for the type is used.
    """
    extensions = FileValidator.SUPPORTED_FORMATS[mime_type]
    extension = Path(filename).suffix.lower()
    if extension not in extensions:
        extension = extensions[0]
    return f"{prefix}/{uuid.uuid4().hex}{extension}"
