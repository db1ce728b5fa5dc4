import io
import plistlib
from typing import BinaryIO


class Plist:
    """
    Over-the-air install manifest for an ipa, the document an
    ``itms-services://?action=download-manifest`` link points at.
    """

    def __init__(self, title: str, version: str, url: str):
        self.title = title
        self.version = version
        self.url = url

    def to_dict(self) -> dict:
        return {
            "items": [
                {
                    "assets": [
                        {"kind": "software-package", "url": self.url},
                    ],
                    "metadata": {
                        "bundle-version": self.version,
                        "kind": "software",
                        "title": self.title,
                    },
                }
            ]
        }

    def dumps(self) -> bytes:
        return plistlib.dumps(self.to_dict(), fmt=plistlib.FMT_XML)

    def reader(self) -> BinaryIO:
        return io.BytesIO(self.dumps())
