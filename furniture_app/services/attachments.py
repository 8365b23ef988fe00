from __future__ import annotations

import logging
from typing import Optional

from fastapi import UploadFile
from sqlalchemy.orm import Session

from ..models.ad import Ad
from ..models.attachment import Attachment
from .files import FileStorage

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "webp"}


def has_upload(file: Optional[UploadFile]) -> bool:
    """An empty multipart part (no filename or zero bytes) counts as no image."""
    if file is None or not file.filename:
        return False
    return file.size != 0


def is_valid_image_file(file: Optional[UploadFile]) -> bool:
    if not has_upload(file):
        return False
    content_type = file.content_type or ""
    if not content_type.startswith("image/"):
        return False
    return FileStorage.get_file_extension(file.filename) in ALLOWED_EXTENSIONS


def create_ad_attachment(storage: FileStorage, file: UploadFile, ad_id: int) -> Attachment:
    logger.info("Creating attachment for ad ID: %s", ad_id)
    extension = storage.get_file_extension(file.filename)
    path = storage.store_ad_image(file, ad_id)
    return Attachment(
        filename=file.filename,
        saved_name=f"image.{extension}",
        file_path=path,
        content_type=file.content_type,
        extension=extension,
    )


def replace_ad_attachment(db: Session, storage: FileStorage, ad: Ad, file: UploadFile) -> Attachment:
    """Old file and record go first; a failed write leaves the ad without an image."""
    if ad.image is not None:
        delete_ad_attachment(db, storage, ad.image, ad.id)
        ad.image = None
    ad.image = create_ad_attachment(storage, file, ad.id)
    return ad.image


def delete_ad_attachment(db: Session, storage: FileStorage, attachment: Optional[Attachment], ad_id: int) -> None:
    if attachment is None:
        return
    logger.info("Deleting attachment ID: %s for ad ID: %s", attachment.id, ad_id)
    storage.delete_ad_image(ad_id)
    db.delete(attachment)
