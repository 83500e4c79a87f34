import logging
import os
import tempfile
from typing import Optional

from imagekitio import ImageKit
from imagekitio.models.UploadFileRequestOptions import UploadFileRequestOptions

from core.config import settings
from core.exceptions import ImageStorageError

logger = logging.getLogger(__name__)

_imagekit: Optional[ImageKit] = None


def get_imagekit() -> ImageKit:
    global _imagekit
    if _imagekit is None:
        _imagekit = ImageKit(
            public_key=settings.imagekit_public_key,
            private_key=settings.imagekit_private_key,
            url_endpoint=settings.imagekit_url_endpoint
        )
    return _imagekit


def item_image_folder(item_id: str) -> str:
    return f"items/{item_id}"


def location_image_folder(location_id: str) -> str:
    return f"locations/{location_id}"


def sub_location_image_folder(location_id: str, sub_location_id: str) -> str:
    return f"locations/{location_id}/sublocations/{sub_location_id}"


async def upload_image_to_imagekit(file_data: bytes, filename: str, folder: str) -> dict:
    """
    Upload an image to ImageKit.

    Args:
        file_data: Image file bytes
        filename: Name for the file
        folder: Folder path in ImageKit, e.g. "items/<item id>"

    Returns:
        dict with 'url', 'file_id' and 'name' keys
    """
    file_ext = os.path.splitext(filename)[1] or '.jpg'
    temp_file_path = None
    try:
        # The SDK wants a file object opened in binary mode
        with tempfile.NamedTemporaryFile(delete=False, suffix=file_ext, mode='wb') as temp_file:
            temp_file.write(file_data)
            temp_file_path = temp_file.name

        upload_options = UploadFileRequestOptions(
            folder=folder,
            use_unique_file_name=True,
            is_private_file=False
        )
        with open(temp_file_path, 'rb') as file_obj:
            upload = get_imagekit().upload_file(
                file=file_obj,
                file_name=filename,
                options=upload_options
            )

        if not upload or not upload.url:
            raise ImageStorageError("Upload returned no URL")

        logger.info("Uploaded %s to %s (%s bytes)", filename, folder, len(file_data))
        return {
            "url": upload.url,
            "file_id": upload.file_id,
            "name": upload.name
        }
    except ImageStorageError:
        raise
    except Exception as e:
        raise ImageStorageError(f"Failed to upload image to ImageKit: {str(e)}") from e
    finally:
        if temp_file_path and os.path.exists(temp_file_path):
            try:
                os.unlink(temp_file_path)
            except OSError as cleanup_error:
                logger.warning("Failed to delete temporary file %s: %s", temp_file_path, cleanup_error)


async def delete_image_from_imagekit(file_id: str) -> bool:
    try:
        get_imagekit().delete_file(file_id)
        return True
    except Exception as e:
        raise ImageStorageError(f"Failed to delete image from ImageKit: {str(e)}") from e
