# app/routers/uploads.py
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from app.core.auth import require_admin
from app.services.upload_service import ImageUploadService

router = APIRouter(tags=["Uploads"])

service = ImageUploadService()


@router.post(
    "/upload",
    dependencies=[Depends(require_admin)],
    summary="Upload an image for a category, product or carousel slide",
)
def upload_image(image: UploadFile | None = File(None)) -> dict[str, str]:
    """
    Store an image and return its public URL.

    - Accepts JPEG, PNG, WEBP, GIF up to 5MB.
    """
    if image is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No image file provided",
        )
    if not image.content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing content-type for uploaded file",
        )

    file_bytes = image.file.read()
    url = service.upload_image(image.content_type, file_bytes)
    return {"url": url}
