import os
from dataclasses import dataclass
from typing import BinaryIO, Optional

from app_distribution.models.bundle import BundleFileExtension


@dataclass
class BundleInfo:
    """Metadata read out of an uploaded apk/ipa."""

    version: str
    identifier: str = ""


@dataclass
class BundleUpload:
    """
    In-memory context for a bundle being created. Never persisted; it is
    passed next to the Bundle row to the operations that need it.
    """

    info: BundleInfo
    file: Optional[BinaryIO] = None
    file_name: str = ""

    @property
    def extension(self) -> BundleFileExtension:
        _, ext = os.path.splitext(self.file_name)
        ext = ext.lower()
        if not BundleFileExtension.is_valid(ext):
            raise ValueError(f"Unsupported bundle file extension: {ext!r}")
        return BundleFileExtension(ext)
