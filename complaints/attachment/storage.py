# complaints/attachment/storage.py
import os
import uuid
from pathlib import Path

from fastapi import UploadFile

from complaints.core.errors import ValidationError

CHUNK_SIZE = 64 * 1024


def stored_name(filename: str | None) -> str:
    suffix = Path(filename or "").suffix.lower()
    return f"{uuid.uuid4().hex}{suffix}"


def save_upload(upload: UploadFile, upload_dir: str, max_bytes: int) -> tuple[str, int]:
    """Write ``upload`` under ``upload_dir`` and return (path, size)."""
    directory = Path(upload_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / stored_name(upload.filename)

    size = 0
    try:
        with path.open("wb") as out:
            while chunk := upload.file.read(CHUNK_SIZE):
                size += len(chunk)
                if size > max_bytes:
                    raise ValidationError(
                        f"File exceeds the {max_bytes // (1024 * 1024)} MB limit", field="file"
                    )
                out.write(chunk)
        if size == 0:
            raise ValidationError("No file uploaded", field="file")
    except BaseException:
        remove_file(str(path))
        raise
    return str(path.resolve()), size


def remove_file(path: str) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
