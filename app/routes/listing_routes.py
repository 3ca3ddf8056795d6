import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.orm import Session

from database.init import get_db
from database.models.user_model import User
from enums.listing_kind import ListingKind
from enums.listing_status import ListingStatus
from schemas.listing_schema import CREATE_SCHEMAS, UPDATE_SCHEMAS, listing_to_response
from services.listing_service import ListingService
from services.media_service import MediaService, get_media_service
from utils.dependencies import admin_required, get_current_user
from utils.exceptions import (
    MediaConfigurationError,
    MediaUploadError,
    ValidationFailed,
)

from responses.success import (
    created_response,
    data_response,
    paginated_response,
    success_response,
)
from responses.error import (
    bad_request_error,
    internal_server_error,
    not_found_error,
)

logger = logging.getLogger(__name__)


def create_listing_router(kind: ListingKind) -> APIRouter:
    """
    Build the router for one kind of listing.

    Lands, houses and apartments expose the same operations; only the
    payload schemas and the `/my-*` path differ. Fixed paths are registered
    before `/{listing_id}` so they are never captured as ids.
    """
    router = APIRouter(prefix=f"/api/{kind.plural}", tags=[kind.plural.capitalize()])
    service = ListingService(kind)
    create_schema = CREATE_SCHEMAS[kind]
    update_schema = UPDATE_SCHEMAS[kind]
    label = kind.label

    def listing_page(items, total, page, limit):
        return paginated_response([listing_to_response(i) for i in items], total, page, limit)

    @router.get("")
    def list_available(
        page: int = Query(1, ge=1),
        limit: int = Query(10, ge=1),
        sort_by: Optional[str] = Query(None, alias="sortBy"),
        sort_order: Optional[str] = Query(None, alias="sortOrder"),
        db: Session = Depends(get_db),
    ):
        try:
            items, total = service.list_available(db, page, limit, sort_by, sort_order)
            return listing_page(items, total, page, limit)
        except ValidationFailed as e:
            return bad_request_error(str(e))
        except Exception as e:
            logger.exception("Failed to list %s", kind.plural)
            return internal_server_error(str(e))

    @router.get("/all")
    def list_all(
        page: int = Query(1, ge=1),
        limit: int = Query(10, ge=1),
        sort_by: Optional[str] = Query(None, alias="sortBy"),
        sort_order: Optional[str] = Query(None, alias="sortOrder"),
        db: Session = Depends(get_db),
        current_user: User = Depends(admin_required),
    ):
        try:
            items, total = service.list_listings(db, page, limit, sort_by, sort_order)
            return listing_page(items, total, page, limit)
        except ValidationFailed as e:
            return bad_request_error(str(e))
        except Exception as e:
            logger.exception("Failed to list all %s", kind.plural)
            return internal_server_error(str(e))

    @router.get("/search")
    def search(
        q: str = Query(""),
        page: int = Query(1, ge=1),
        limit: int = Query(10, ge=1),
        sort_by: Optional[str] = Query(None, alias="sortBy"),
        sort_order: Optional[str] = Query(None, alias="sortOrder"),
        db: Session = Depends(get_db),
    ):
        try:
            items, total = service.search(db, q, page, limit, sort_by, sort_order)
            return listing_page(items, total, page, limit)
        except ValidationFailed as e:
            return bad_request_error(str(e))
        except Exception as e:
            logger.exception("Search over %s failed", kind.plural)
            return internal_server_error(str(e))

    @router.get("/filter")
    def filter_listings(
        min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
        max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
        location: Optional[str] = None,
        size: Optional[str] = None,
        status: Optional[ListingStatus] = None,
        page: int = Query(1, ge=1),
        limit: int = Query(10, ge=1),
        sort_by: Optional[str] = Query(None, alias="sortBy"),
        sort_order: Optional[str] = Query(None, alias="sortOrder"),
        db: Session = Depends(get_db),
    ):
        try:
            items, total = service.filter(
                db,
                min_price=min_price,
                max_price=max_price,
                location=location,
                size=size,
                status=status,
                page=page,
                limit=limit,
                sort_by=sort_by,
                sort_order=sort_order,
            )
            return listing_page(items, total, page, limit)
        except ValidationFailed as e:
            return bad_request_error(str(e))
        except Exception as e:
            logger.exception("Filter over %s failed", kind.plural)
            return internal_server_error(str(e))

    # Favorites

    @router.get("/favorites")
    def get_favorites(
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
    ):
        listings = service.get_favorites(db, current_user)
        return data_response([listing_to_response(listing) for listing in listings])

    @router.post("/favorites/{listing_id}")
    def add_favorite(
        listing_id: int,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
    ):
        listing = service.get_listing(db, listing_id)
        if not listing:
            return not_found_error(f"{label} not found")
        try:
            service.add_favorite(db, current_user, listing)
            return success_response(f"{label} added to favorites")
        except ValidationFailed as e:
            return bad_request_error(str(e))
        except Exception as e:
            logger.exception("Failed to add favorite %s %s", kind.value, listing_id)
            return internal_server_error(str(e))

    @router.delete("/favorites/{listing_id}")
    def remove_favorite(
        listing_id: int,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
    ):
        if not service.remove_favorite(db, current_user, listing_id):
            return not_found_error(f"{label} not found in favorites")
        return success_response(f"{label} removed from favorites")

    @router.get(f"/my-{kind.plural}")
    def get_purchased(
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
    ):
        listings = service.get_purchased(db, current_user)
        return data_response([listing_to_response(listing) for listing in listings])

    # Media

    @router.get("/cloudinary-signature")
    def cloudinary_signature(
        current_user: User = Depends(admin_required),
        media: MediaService = Depends(get_media_service),
    ):
        try:
            return data_response(media.signature(kind.plural))
        except MediaConfigurationError as e:
            logger.error("Signature requested without Cloudinary credentials")
            return internal_server_error(str(e), error="media_not_configured")

    @router.post("/upload")
    def upload_media(
        media_files: List[UploadFile] = File(..., alias="media"),
        current_user: User = Depends(admin_required),
        media: MediaService = Depends(get_media_service),
    ):
        try:
            urls = media.upload([(f.filename, f.file) for f in media_files], kind.plural)
            return data_response({"urls": urls}, f"{len(urls)} file(s) uploaded")
        except ValidationFailed as e:
            return bad_request_error(str(e))
        except MediaConfigurationError as e:
            return internal_server_error(str(e), error="media_not_configured")
        except MediaUploadError as e:
            return internal_server_error(str(e), error="upload_failed")

    # CRUD

    @router.post("")
    def create_listing(
        payload: create_schema,
        db: Session = Depends(get_db),
        current_user: User = Depends(admin_required),
    ):
        try:
            listing = service.create_listing(db, payload)
            return created_response(listing_to_response(listing), f"{label} created successfully")
        except ValidationFailed as e:
            return bad_request_error(str(e))
        except Exception as e:
            logger.exception("Failed to create %s", kind.value)
            return internal_server_error(str(e))

    @router.get("/{listing_id}")
    def get_listing(listing_id: int, db: Session = Depends(get_db)):
        listing = service.get_listing(db, listing_id)
        if not listing:
            return not_found_error(f"{label} not found")
        return data_response(listing_to_response(listing))

    @router.put("/{listing_id}")
    def update_listing(
        listing_id: int,
        payload: update_schema,
        db: Session = Depends(get_db),
        current_user: User = Depends(admin_required),
    ):
        listing = service.get_listing(db, listing_id)
        if not listing:
            return not_found_error(f"{label} not found")
        try:
            listing = service.update_listing(db, listing, payload)
            return data_response(listing_to_response(listing), f"{label} updated successfully")
        except ValidationFailed as e:
            return bad_request_error(str(e))
        except Exception as e:
            logger.exception("Failed to update %s %s", kind.value, listing_id)
            return internal_server_error(str(e))

    @router.delete("/{listing_id}")
    def delete_listing(
        listing_id: int,
        db: Session = Depends(get_db),
        current_user: User = Depends(admin_required),
    ):
        listing = service.get_listing(db, listing_id)
        if not listing:
            return not_found_error(f"{label} not found")
        try:
            removed = service.delete_listing(db, listing)
            return success_response(f"{label} deleted successfully", data=removed)
        except Exception as e:
            logger.exception("Failed to delete %s %s", kind.value, listing_id)
            return internal_server_error(str(e))

    return router


land_router = create_listing_router(ListingKind.LAND)
house_router = create_listing_router(ListingKind.HOUSE)
apartment_router = create_listing_router(ListingKind.APARTMENT)
