# furniture_app/services/files.py
from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from fastapi import UploadFile

from ..errors import ServerError

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = "jpg"


class FileStorage:
    """
    Ad images on local disk:
        <root>/ads/<ad_id>/image.<ext>
    served under <url_prefix>/ads/<ad_id>/image.<ext>.
    """

    def __init__(self, root: str | os.PathLike, url_prefix: str = "/uploads") -> None:
        self.root = Path(root)
        self.url_prefix = url_prefix.rstrip("/")

    @staticmethod
    def get_file_extension(filename: str | None) -> str:
        if not filename or "." not in filename:
            return DEFAULT_EXTENSION
        ext = filename.rsplit(".", 1)[1].strip().lower()
        return ext or DEFAULT_EXTENSION

    def ad_dir(self, ad_id: int) -> Path:
        return self.root / "ads" / str(ad_id)

    def store_ad_image(self, file: UploadFile, ad_id: int) -> str:
        saved_name = "image." + self.get_file_extension(file.filename)
        target = self.ad_dir(ad_id) / saved_name
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            file.file.seek(0)
            with open(target, "wb") as out:
                shutil.copyfileobj(file.file, out)
        except OSError as e:
            logger.error("Storing image for ad %s failed: %s", ad_id, e)
            raise ServerError("Attachment", "Attachment cannot get uploaded") from e
        return f"{self.url_prefix}/ads/{ad_id}/{saved_name}"

    def delete_ad_image(self, ad_id: int) -> None:
        # best-effort: a file we cannot remove must not block the caller
        ad_dir = self.ad_dir(ad_id)
        if not ad_dir.exists():
            return
        for path in sorted(ad_dir.rglob("*"), reverse=True):
            try:
                if path.is_dir():
                    path.rmdir()
                else:
                    path.unlink()
            except OSError:
                logger.warning("Could not remove %s", path)
        try:
            ad_dir.rmdir()
        except OSError:
            logger.warning("Could not remove %s", ad_dir)
