from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class BundleJsonResponse(BaseModel):
    file_id: str
    version: str
    revision: int
    install_url: str
    qr_code_url: str


class BundleRead(BaseModel):
    id: int
    app_id: int
    file_id: str
    platform_type: int
    bundle_version: str
    revision: int
    description: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class BundleUpdate(BaseModel):
    description: str = ""
    file_id: Optional[str] = None
