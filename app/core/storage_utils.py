import uuid

from app.core.config import get_settings
from app.core.supabase_client import supabase_admin

settings = get_settings()


def upload_to_storage(path: str, file_bytes: bytes, content_type: str) -> str:
    """
    Put `file_bytes` at `path` in the STORAGE_BUCKET and return its public URL.

    An object already stored at `path` is replaced (upsert).

    Raises:
        RuntimeError: storage credentials are not configured.
        Whatever the Supabase client raises when the upload is refused.
    """
    bucket = supabase_admin().storage.from_(settings.STORAGE_BUCKET)
    bucket.upload(path, file_bytes, {"upsert": "true", "content-type": content_type})
    return bucket.get_public_url(path)


def object_path(folder: str, ext: str) -> str:
    """
    Random object key inside `folder`: "uploads/1b4e...c9.png".
    """
    return f"{folder}/{uuid.uuid4()}.{ext}"
