import logging

from fastapi import HTTPException, status

from app.core.storage_utils import object_path, upload_to_storage

logger = logging.getLogger(__name__)

# --- Image config ---

UPLOAD_FOLDER = "uploads"

MAX_IMAGE_BYTES = 5 * 1024 * 1024  # 5MB per image

ALLOWED_IMAGE_CONTENT_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}


class ImageUploadService:
    """
    Validate and store catalog images (categories, products, carousel).
    """

    @staticmethod
    def _validate_and_get_ext(content_type: str, file_bytes: bytes) -> str:
        if content_type not in ALLOWED_IMAGE_CONTENT_TYPES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Unsupported image type. Allowed: JPEG, PNG, WEBP, GIF.",
            )

        if len(file_bytes) > MAX_IMAGE_BYTES:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail="Image too large (max 5MB).",
            )

        if not file_bytes:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Uploaded image is empty",
            )

        return ALLOWED_IMAGE_CONTENT_TYPES[content_type]

    def upload_image(self, content_type: str, file_bytes: bytes) -> str:
        """
        Upload to a random filename and return its public URL.

        Path pattern:
            uploads/<uuid>.<ext>

        Raises:
            HTTPException(502): if the storage backend fails; the caller
                can retry without losing the rest of its form.
        """
        ext = self._validate_and_get_ext(content_type, file_bytes)
        path = object_path(UPLOAD_FOLDER, ext)

        try:
            return upload_to_storage(path, file_bytes, content_type)
        except Exception as exc:
            logger.error("Image upload to %s failed: %s", path, exc)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Image storage is unavailable, please retry",
            )
