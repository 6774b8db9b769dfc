"""Validation helpers for uploaded photos and import files."""

import base64
import binascii
import re
from typing import Tuple

from fastapi import HTTPException, UploadFile

MAX_PHOTO_BYTES = 1 * 1024 * 1024
MAX_IMPORT_BYTES = 50 * 1024 * 1024

ALLOWED_IMPORT_TYPES = {
    "application/json",
    "text/json",
    "text/plain",
    "application/octet-stream",
}

_DATA_URI_RE = re.compile(r"^data:(?P<mime>image/[\w.+-]+);base64,(?P<data>.*)$", re.DOTALL)


def decode_photo_data_uri(data_uri: str) -> Tuple[str, bytes]:
    """Split an image data URI into its MIME type and decoded bytes.

    Raises:
        ValueError: If the value is not a base64 `image/*` data URI or the
            decoded photo is larger than `MAX_PHOTO_BYTES`.
    """
    match = _DATA_URI_RE.match(data_uri or "")
    if not match:
        raise ValueError("Photo must be a base64 image data URI.")
    try:
        raw = base64.b64decode(match.group("data"), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError("Photo data URI is not valid base64.") from exc
    if len(raw) > MAX_PHOTO_BYTES:
        raise ValueError("The selected image is over 1MB. Please resize it or choose a smaller file.")
    return match.group("mime"), raw


def validate_import_file(upload: UploadFile) -> None:
    """Validate that the uploaded file looks like a JSON export."""
    if not upload.filename:
        raise HTTPException(status_code=400, detail="Import file must have a filename.")
    if upload.content_type:
        content_type = upload.content_type.lower().split(";", 1)[0].strip()
        if content_type not in ALLOWED_IMPORT_TYPES:
            raise HTTPException(status_code=415, detail=f"Unsupported import content type: {upload.content_type}")
    elif not upload.filename.lower().endswith(".json"):
        raise HTTPException(status_code=415, detail="Unsupported or missing import content type.")


async def read_import_bytes(upload: UploadFile) -> bytes:
    """Read validated import bytes, ensuring the upload is not empty or oversized."""
    validate_import_file(upload)
    data = await upload.read()
    if not data:
        raise HTTPException(status_code=400, detail="Uploaded import file is empty.")
    if len(data) > MAX_IMPORT_BYTES:
        raise HTTPException(status_code=413, detail="Uploaded import file is too large.")
    return data
