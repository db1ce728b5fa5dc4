import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app_distribution.db.base import Base
from app_distribution.models.app import App
from app_distribution.models.bundle import Bundle, BundlePlatformType
from app_distribution.models.bundle_info import BundleInfo, BundleUpload


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def app_row(db):
    app = App(title="Field Notes", description="internal beta")
    db.add(app)
    db.commit()
    return app


@pytest.fixture
def make_bundle(db, app_row):
    def _make(file_id="drive-file-1", platform=BundlePlatformType.IOS, version="1.2.3", revision=1):
        bundle = Bundle(
            app_id=app_row.id,
            file_id=file_id,
            platform_type=platform,
            revision=revision,
            description="first build",
        )
        upload = BundleUpload(
            info=BundleInfo(version=version),
            file_name=f"build{platform.extension().value}",
        )
        bundle.save(db, upload)
        db.commit()
        return bundle

    return _make
