from fastapi import FastAPI

from app_distribution.api.routes import bundles
from app_distribution.core.config import settings
from app_distribution.core.logging_config import setup_logging
import app_distribution.models  # noqa: F401  # import models so metadata is populated


setup_logging(settings.LOG_LEVEL)

app_distribution = FastAPI(title=settings.PROJECT_NAME)


# include routers
app_distribution.include_router(bundles.router)
