# storefront/core/storage_utils.py
import uuid

from fastapi import HTTPException, status

from storefront.core.supabase_client import require_supabase_admin

PRODUCT_BUCKET = "product-images"
REVIEW_BUCKET = "review-images"
DESIGN_BUCKET = "design-references"

# content-type -> extension
IMAGE_EXTENSIONS: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}


def validate_image(
    content_type: str,
    file_bytes: bytes,
    max_bytes: int,
    allowed_types: set[str] | None = None,
) -> str:
    """
    Validate an uploaded image and return its file extension.

    Args:
        content_type: MIME type reported by the client.
        file_bytes: raw file content.
        max_bytes: size limit for this kind of upload.
        allowed_types: explicit whitelist; None accepts any known image/* type.

    Raises:
        HTTPException(400): unsupported type.
        HTTPException(413): file too large.
    """
    if allowed_types is not None and content_type not in allowed_types:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid file type. Allowed types: {', '.join(sorted(allowed_types))}",
        )

    if not content_type.startswith("image/") or content_type not in IMAGE_EXTENSIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please upload only image files",
        )

    if len(file_bytes) > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File too large. Maximum size: {max_bytes // (1024 * 1024)}MB",
        )

    return IMAGE_EXTENSIONS[content_type]


def upload_to_storage(
    bucket: str,
    path: str,
    file_bytes: bytes,
    content_type: str,
) -> str:
    """
    Upload raw bytes to Supabase Storage and return a public URL.

    Args:
        bucket: storage bucket name.
        path: full object path inside the bucket.
              Example: "user_2abc/1718000000-<uuid>.png"
        file_bytes: file content in bytes.
        content_type: MIME type stored with the object.

    Raises:
        HTTPException(503): if the service role client is not configured.
        Any exception raised by Supabase client if upload fails.
    """
    client = require_supabase_admin()
    client.storage.from_(bucket).upload(
        path,
        file_bytes,
        {"content-type": content_type, "cache-control": "3600", "upsert": "false"},
    )
    return client.storage.from_(bucket).get_public_url(path)


def delete_from_storage(bucket: str, path: str) -> None:
    """
    Delete a file from Supabase Storage by its object path.
    """
    client = require_supabase_admin()
    client.storage.from_(bucket).remove([path])


def extract_path_from_public_url(bucket: str, url: str) -> str | None:
    """
    Given a public URL, extract the object path relative to the bucket.

    Example:
        https://<proj>.supabase.co/storage/v1/object/public/review-images/u/a.png
        -> 'u/a.png'
    """
    marker = f"/storage/v1/object/public/{bucket}/"
    idx = url.find(marker)
    if idx == -1:
        return None
    return url[idx + len(marker) :]


def delete_public_url(bucket: str, url: str) -> None:
    """
    Convenience helper: delete a file by its public URL.
    No-op if the URL does not belong to this bucket.
    """
    path = extract_path_from_public_url(bucket, url)
    if path:
        delete_from_storage(bucket, path)


def generate_object_path(owner: str, ext: str) -> str:
    """
    Build a unique object path: "<owner>/<uuid4>.<ext>".
    """
    return f"{owner}/{uuid.uuid4()}.{ext}"
