"""
Image upload endpoint backed by object storage.
"""

from fastapi import APIRouter, Depends, File, UploadFile, status
from starlette.concurrency import run_in_threadpool
from botocore.exceptions import BotoCoreError, ClientError

from portal.models.user import User
from portal.services.storage import StorageClient
from portal.utils.dependencies import get_current_user, get_storage
from portal.utils.exceptions import FileUploadError
from portal.utils.file_utils import FileValidator, generate_storage_key
import logging

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Uploads"])


@router.post(
    "/upload",
    status_code=status.HTTP_201_CREATED,
    summary="Upload image",
    description="Upload a JPEG, PNG or WebP image (max 10MB) and get its public URL"
)
async def upload_image(
    file: UploadFile = File(..., description="Image file"),
    current_user: User = Depends(get_current_user),
    storage: StorageClient = Depends(get_storage)
) -> dict:
    """
    Validate and store an uploaded image.

    Args:
        file: Uploaded image
        current_user: Current authenticated user
        storage: Shared storage client

    Returns:
        Public URL of the stored object

    Raises:
        FileUploadError: If the file is invalid or storage rejects it
        UnsupportedFileTypeError: If the content type is not an accepted image type
        FileSizeExceededError: If the file exceeds the configured limit
    """
    content, mime_type = await FileValidator.read_upload(file)
    key = generate_storage_key(file.filename, mime_type)

    try:
        url = await run_in_threadpool(storage.upload, key, content, mime_type)
    except (BotoCoreError, ClientError) as e:
        logger.error(f"Upload of {key} by {current_user.email} failed: {str(e)}")
        raise FileUploadError("Storage service rejected the file")

    logger.info(f"User {current_user.email} uploaded {key}")
    return {"url": url}
