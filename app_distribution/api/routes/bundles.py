import logging
from urllib.parse import urlencode

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import RedirectResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import NoResultFound

from app_distribution.db.session import get_db
from app_distribution.models.bundle import Bundle, get_bundle
from app_distribution.schemas.bundle import BundleJsonResponse, BundleRead, BundleUpdate
from app_distribution.services.google_drive import GoogleService
from app_distribution.services.uri_builder import UriBuilder

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bundle", tags=["bundles"])


def get_google_service() -> GoogleService:
    return GoogleService()


def get_uri_builder(request: Request) -> UriBuilder:
    return UriBuilder(str(request.base_url))


def _load_bundle(db: Session, bundle_id: int) -> Bundle:
    try:
        return get_bundle(db, bundle_id)
    except NoResultFound:
        raise HTTPException(status_code=404, detail="Bundle not found")


@router.get("/{bundle_id}", response_model=BundleJsonResponse)
def read_bundle(
    bundle_id: int,
    db: Session = Depends(get_db),
    uri_builder: UriBuilder = Depends(get_uri_builder),
):
    bundle = _load_bundle(db, bundle_id)
    return bundle.json_response(uri_builder)


@router.get("/{bundle_id}/download")
def download_bundle(
    bundle_id: int,
    db: Session = Depends(get_db),
    uri_builder: UriBuilder = Depends(get_uri_builder),
    google: GoogleService = Depends(get_google_service),
):
    bundle = _load_bundle(db, bundle_id)

    if bundle.is_ipa():
        # iOS installs go through the manifest, not the ipa itself
        manifest_url = uri_builder.uri_for(f"bundle/{bundle.id}/plist")
        query = urlencode({"action": "download-manifest", "url": str(manifest_url)})
        location = f"itms-services://?{query}"
    else:
        location = google.public_url(bundle.file_id)

    return RedirectResponse(location, status_code=status.HTTP_302_FOUND)


@router.get("/{bundle_id}/file")
def read_bundle_file(
    bundle_id: int,
    db: Session = Depends(get_db),
    google: GoogleService = Depends(get_google_service),
):
    bundle = _load_bundle(db, bundle_id)
    return RedirectResponse(google.public_url(bundle.file_id), status_code=status.HTTP_302_FOUND)


@router.get("/{bundle_id}/plist")
def read_bundle_plist(
    bundle_id: int,
    db: Session = Depends(get_db),
    uri_builder: UriBuilder = Depends(get_uri_builder),
):
    bundle = _load_bundle(db, bundle_id)
    if not bundle.is_ipa():
        raise HTTPException(status_code=400, detail="Manifest is only available for ipa bundles")

    try:
        reader = bundle.plist_reader(db, uri_builder.uri_for(f"bundle/{bundle.id}/file"))
    except NoResultFound:
        raise HTTPException(status_code=404, detail="App not found")

    return Response(content=reader.read(), media_type="application/x-plist")


@router.put("/{bundle_id}", response_model=BundleRead)
def update_bundle(
    bundle_id: int,
    payload: BundleUpdate,
    db: Session = Depends(get_db),
):
    changes = Bundle(id=bundle_id, description=payload.description, file_id=payload.file_id)
    try:
        bundle = changes.update(db)
    except NoResultFound:
        raise HTTPException(status_code=404, detail="Bundle not found")
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Drive file {payload.file_id} is already used by another bundle",
        )
    db.commit()
    db.refresh(bundle)
    return bundle


@router.delete("/{bundle_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_bundle(
    bundle_id: int,
    db: Session = Depends(get_db),
    google: GoogleService = Depends(get_google_service),
):
    bundle = _load_bundle(db, bundle_id)
    file_id = bundle.file_id

    try:
        bundle.delete(db, google)
    except httpx.HTTPError as e:
        # the row is already gone; keep it that way
        db.commit()
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Bundle deleted but Drive file {file_id} was not removed: {e}",
        )

    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
