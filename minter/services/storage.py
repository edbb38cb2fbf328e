from pathlib import Path
from uuid import uuid4

from fastapi import UploadFile
from loguru import logger

from minter.config import settings
from minter.models.upload import UploadedAsset


class UploadTooLarge(ValueError):
    pass


def staged_path(asset: UploadedAsset) -> Path:
    return settings.upload_path / asset.storage_key


async def save_upload(upload: UploadFile) -> UploadedAsset:
    data = await upload.read(settings.max_upload_bytes + 1)
    if len(data) > settings.max_upload_bytes:
        logger.warning(
            "Upload exceeds ceiling filename={} max_bytes={}",
            upload.filename,
            settings.max_upload_bytes,
        )
        raise UploadTooLarge(f"File exceeds {settings.max_upload_bytes} bytes")

    file_id = str(uuid4())
    storage_key = f"{file_id}{Path(upload.filename or '').suffix.lower()}"
    destination = settings.upload_path / storage_key
    destination.write_bytes(data)
    logger.debug(
        "File staged storage_key={} destination={} size_bytes={}",
        storage_key,
        str(destination),
        len(data),
    )

    return UploadedAsset(
        id=file_id,
        filename=upload.filename or storage_key,
        content_type=upload.content_type or "application/octet-stream",
        storage_key=storage_key,
        size_bytes=len(data),
    )


def delete_upload(asset: UploadedAsset) -> None:
    path = staged_path(asset)
    if not path.exists():
        return
    path.unlink()
    logger.debug("Staged file removed storage_key={}", asset.storage_key)
