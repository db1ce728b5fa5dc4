import logging
from datetime import datetime, timezone
from enum import Enum, IntEnum
from typing import TYPE_CHECKING, BinaryIO, Union

import httpx
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    ForeignKey,
    TypeDecorator,
)
from sqlalchemy.orm import Session, relationship
from sqlalchemy.orm.exc import NoResultFound

from app_distribution.db.base import Base
from app_distribution.models.app import App, get_app
from app_distribution.schemas.bundle import BundleJsonResponse
from app_distribution.services.plist import Plist

if TYPE_CHECKING:
    from app_distribution.models.bundle_info import BundleUpload
    from app_distribution.services.google_drive import GoogleService
    from app_distribution.services.uri_builder import UriBuilder


logger = logging.getLogger(__name__)


class BundlePlatformType(IntEnum):
    ANDROID = 1
    IOS = 2

    def extension(self) -> "BundleFileExtension":
        return _EXTENSION_BY_PLATFORM[self]


class BundleFileExtension(str, Enum):
    APK = ".apk"
    IPA = ".ipa"

    def platform_type(self) -> BundlePlatformType:
        return _PLATFORM_BY_EXTENSION[self]

    @classmethod
    def is_valid(cls, value) -> bool:
        return value in tuple(ext.value for ext in cls)


_EXTENSION_BY_PLATFORM = {
    BundlePlatformType.ANDROID: BundleFileExtension.APK,
    BundlePlatformType.IOS: BundleFileExtension.IPA,
}
_PLATFORM_BY_EXTENSION = {ext: pt for pt, ext in _EXTENSION_BY_PLATFORM.items()}


class PlatformTypeColumn(TypeDecorator):
    """Stores BundlePlatformType as its integer value; anything else is refused."""

    impl = Integer
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return BundlePlatformType(value).value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return BundlePlatformType(value)


class Bundle(Base):
    __tablename__ = "bundle"

    id = Column(Integer, primary_key=True, index=True)
    app_id = Column(Integer, ForeignKey("app.id", ondelete="CASCADE"), nullable=False, index=True)

    # The ID used by Google Drive to store the binary
    file_id = Column(String, nullable=False, unique=True, index=True)

    platform_type = Column(PlatformTypeColumn, nullable=False)
    bundle_version = Column(String, nullable=False)
    revision = Column(Integer, nullable=False, default=1)
    description = Column(Text, nullable=False, default="")

    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    owner = relationship("App", back_populates="bundles")

    def __repr__(self) -> str:
        return f"<Bundle id={self.id} app={self.app_id} ver={self.bundle_version} rev={self.revision}>"

    def json_response(self, uri_builder: "UriBuilder") -> BundleJsonResponse:
        install_url = uri_builder.uri_for(f"bundle/{self.id}/download")
        qr_code_url = uri_builder.uri_for(f"bundle/{self.id}")

        return BundleJsonResponse(
            file_id=self.file_id,
            version=self.bundle_version,
            revision=self.revision,
            install_url=str(install_url),
            qr_code_url=str(qr_code_url),
        )

    def plist(self, db: Session, ipa_url: Union[str, httpx.URL]) -> Plist:
        app = self.app(db)
        return Plist(app.title, self.bundle_version, str(ipa_url))

    def plist_reader(self, db: Session, ipa_url: Union[str, httpx.URL]) -> BinaryIO:
        return self.plist(db, ipa_url).reader()

    def build_file_name(self, upload: "BundleUpload") -> str:
        return "app_{}_ver_{}_rev_{}{}".format(
            self.app_id,
            upload.info.version,
            self.revision,
            BundlePlatformType(self.platform_type).extension().value,
        )

    def is_apk(self) -> bool:
        return self.platform_type == BundlePlatformType.ANDROID

    def is_ipa(self) -> bool:
        return self.platform_type == BundlePlatformType.IOS

    def app(self, db: Session) -> App:
        return get_app(db, self.app_id)

    def save(self, db: Session, upload: "BundleUpload") -> "Bundle":
        _prepare_insert(self, upload)
        db.add(self)
        db.flush()
        logger.info(
            "Created bundle %s for app %s (ver %s rev %s)",
            self.id, self.app_id, self.bundle_version, self.revision,
        )
        return self

    def update(self, db: Session) -> "Bundle":
        """
        Copy description (and file_id, when given) onto the stored row.
        Every other column keeps its persisted value.
        """
        current = get_bundle(db, self.id)

        current.description = self.description
        if self.file_id:
            current.file_id = self.file_id

        _prepare_update(current)
        db.flush()
        logger.info("Updated bundle %s", current.id)
        return current

    def delete_from_db(self, db: Session) -> None:
        target = self if self in db else get_bundle(db, self.id)
        db.delete(target)
        db.flush()
        logger.info("Deleted bundle %s from database", self.id)

    def delete_from_google_drive(self, service: "GoogleService") -> None:
        service.delete_file(self.file_id)

    def delete(self, db: Session, service: "GoogleService") -> None:
        """
        Remove the row, then the Drive file. If the Drive call fails the row
        stays deleted and the file is left behind.
        """
        self.delete_from_db(db)
        try:
            self.delete_from_google_drive(service)
        except httpx.HTTPError:
            logger.error(
                "Bundle %s removed from database but Drive file %s was not deleted",
                self.id, self.file_id,
            )
            raise


def _prepare_insert(bundle: Bundle, upload: "BundleUpload") -> None:
    bundle.bundle_version = upload.info.version
    bundle.created_at = datetime.now(timezone.utc)
    bundle.updated_at = bundle.created_at


def _prepare_update(bundle: Bundle) -> None:
    bundle.updated_at = datetime.now(timezone.utc)


def create_bundle(db: Session, bundle: Bundle, upload: "BundleUpload") -> Bundle:
    return bundle.save(db, upload)


def get_bundle(db: Session, bundle_id: int) -> Bundle:
    bundle = db.get(Bundle, bundle_id)
    if bundle is None:
        raise NoResultFound(f"Bundle {bundle_id} not found")
    return bundle


def get_bundle_by_file_id(db: Session, file_id: str) -> Bundle:
    return db.query(Bundle).filter(Bundle.file_id == file_id).one()
