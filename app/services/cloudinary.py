import cloudinary
import cloudinary.uploader
from app.core.config import settings
from app.core.exceptions import InvalidArgument
import logging
from fastapi import UploadFile
from uuid import uuid4

# Configuration
cloudinary.config(
    cloud_name = settings.CLOUDINARY_CLOUD_NAME,
    api_key = settings.CLOUDINARY_API_KEY,
    api_secret = settings.CLOUDINARY_API_SECRET,
    secure=True
)

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/webp", "image/gif"}

async def handle_cloudinary_upload(uploaded_file: UploadFile, folder_name: str) -> dict:
    """
    Read a FastAPI UploadFile and push it to Cloudinary.
    """
    try:
        file_content = await uploaded_file.read()
    except Exception as e:
        logger.error(f"Failed to read file content: {e}")
        raise

    public_id = f"{folder_name}/{uuid4()}"

    try:
        upload_result = cloudinary.uploader.upload(
            file_content,
            public_id=public_id,
            resource_type="image"
        )
    except Exception as e:
        logger.error(f"Cloudinary upload failed: {e}")
        raise

    return {
        "file_url": upload_result["secure_url"],
        "public_id": upload_result["public_id"],
        "bytes": upload_result.get("bytes"),
    }

async def upload_room_image(uploaded_file: UploadFile, room_id: int) -> dict:
    """Store a room photo; `file_url` is the reference kept on the room."""
    if uploaded_file.content_type not in ALLOWED_IMAGE_TYPES:
        raise InvalidArgument(f"Unsupported image type {uploaded_file.content_type!r}")

    upload_info = await handle_cloudinary_upload(uploaded_file, f"{settings.ROOM_IMAGE_FOLDER}/{room_id}")
    logger.info(f"Stored image {upload_info['public_id']} for room {room_id}")
    return upload_info

def delete_cloudinary_file(public_id: str) -> bool:
    """Best-effort removal of a stored file; failures are logged with the public id."""
    try:
        cloudinary.uploader.destroy(public_id)
    except Exception as e:
        logger.error(f"Failed to destroy file {public_id}: {e}")
        return False
    logger.info(f"Destroyed file {public_id}")
    return True
