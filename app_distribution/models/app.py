from sqlalchemy import Column, Integer, String, Text, DateTime, func
from sqlalchemy.orm import Session, relationship
from sqlalchemy.orm.exc import NoResultFound

from app_distribution.db.base import Base


class App(Base):
    __tablename__ = "app"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    bundles = relationship(
        "Bundle",
        back_populates="owner",
        order_by="Bundle.revision",
    )


def get_app(db: Session, app_id: int) -> App:
    app = db.get(App, app_id)
    if app is None:
        raise NoResultFound(f"App {app_id} not found")
    return app
