"""
Admin API

JSON endpoints behind the operator's search-and-import screen:

    GET  /health
    GET  /api/session     issue a session id and its anti-forgery nonce
    POST /api/search      search Discogs releases
    POST /api/products    import a release as a product
    GET  /api/settings    read the Discogs token and default status
    POST /api/settings    update them

Every response is an envelope: ``{"success": true, "data": ...}`` or
``{"success": false, "data": {"message": ...}}``.
"""

import logging
from dataclasses import asdict
from typing import Any, Optional

from fastapi import Depends, FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..common.errors import ValidationError, VinylShopError
from ..common.settings import (
    ALL_CAPABILITIES,
    CAPABILITY_MANAGE_PRODUCTS,
    CAPABILITY_MANAGE_SETTINGS,
    save_settings,
)
from ..context import ServiceContext
from .security import NonceManager, check_any_capability, check_nonce

logger = logging.getLogger(__name__)


class SearchRequest(BaseModel):
    query: str = ""
    page: int = 1


class AddProductRequest(BaseModel):
    release_id: Optional[int] = None


class SettingsRequest(BaseModel):
    discogs_token: str = ""
    default_product_status: str = "draft"


def success(data: Any) -> dict:
    return {"success": True, "data": data}


def failure(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "data": {"message": message}})


def create_app(context: ServiceContext) -> FastAPI:
    """Build the admin API around an explicitly constructed service context."""
    app = FastAPI(
        title="Vinyl Shop Discogs Admin API",
        description="Search Discogs and import releases as Shopify products",
        version="1.0.0",
    )
    app.state.context = context
    nonces = NonceManager(context.settings.session_secret)
    app.state.nonces = nonces

    @app.exception_handler(VinylShopError)
    async def handle_vinyl_shop_error(request: Request, exc: VinylShopError):
        logger.info("%s %s failed (%s): %s", request.method, request.url.path, exc.code, exc.message)
        return failure(exc.message, exc.http_status)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return failure("Invalid request.", 400)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("%s %s failed unexpectedly", request.method, request.url.path, exc_info=exc)
        return failure("Unexpected error.", 500)

    def require(*capabilities: str, verify_nonce: bool = True):
        def dependency(
            x_admin_key: str = Header(default=None, alias="X-Admin-Key"),
            x_session_id: str = Header(default=None, alias="X-Session-Id"),
            x_nonce: str = Header(default=None, alias="X-Nonce"),
        ):
            if verify_nonce:
                check_nonce(nonces, x_session_id or "", x_nonce or "")
            check_any_capability(context.settings.admin_keys, x_admin_key or "", capabilities)
        return dependency

    @app.get("/health")
    def health():
        return success({"status": "ok"})

    @app.get("/api/session", dependencies=[Depends(require(*ALL_CAPABILITIES, verify_nonce=False))])
    def session(x_session_id: str = Header(default=None, alias="X-Session-Id")):
        session_id = x_session_id or nonces.new_session_id()
        return success({"session_id": session_id, "nonce": nonces.create(session_id)})

    @app.post("/api/search", dependencies=[Depends(require(CAPABILITY_MANAGE_PRODUCTS))])
    def search(body: SearchRequest):
        query = body.query.strip()
        if not query:
            raise ValidationError("Search query is required.")

        with context.catalog() as catalog:
            page = catalog.search(query, page=body.page)
        return success(asdict(page))

    @app.post("/api/products", dependencies=[Depends(require(CAPABILITY_MANAGE_PRODUCTS))])
    def add_product(body: AddProductRequest):
        if not body.release_id or body.release_id <= 0:
            raise ValidationError("Release ID is required.")

        with context.catalog() as catalog:
            result = context.importer(catalog).import_release(body.release_id)
        return success({
            "product_id": result.product_id,
            "edit_url": result.admin_url,
            "image_attached": result.image_attached,
        })

    @app.get("/api/settings", dependencies=[Depends(require(CAPABILITY_MANAGE_SETTINGS, verify_nonce=False))])
    def read_settings():
        settings = context.settings
        return success({
            "discogs_token": settings.discogs_token,
            "default_product_status": settings.default_product_status,
        })

    @app.post("/api/settings", dependencies=[Depends(require(CAPABILITY_MANAGE_SETTINGS))])
    def update_settings(body: SettingsRequest):
        settings = save_settings(context.settings, body.discogs_token, body.default_product_status)
        return success({
            "message": "Settings saved successfully.",
            "discogs_token": settings.discogs_token,
            "default_product_status": settings.default_product_status,
        })

    return app
