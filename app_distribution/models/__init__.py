from app_distribution.db.base import Base
from app_distribution.models.app import App
from app_distribution.models.bundle import Bundle
