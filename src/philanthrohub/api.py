"""
Directory HTTP service.
Routes: GET /api/organizations, POST /api/organizations, POST /api/organizations/submissions

The endpoints are thin boundaries over ``DirectoryStore``; the store is in memory and
resets whenever the service restarts.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from philanthrohub.config.models import ServerSettings
from philanthrohub.directory import DirectoryStore, OrganizationDraft, parse_application, seed_organizations
from philanthrohub.errors import ValidationError

LOGGER = logging.getLogger(__name__)

CREATE_FAILED_MESSAGE = "Failed to create organization"

router = APIRouter(prefix="/api/organizations", tags=["organizations"])


def get_store(request: Request) -> DirectoryStore:
    """Return the store attached to the running application."""
    return request.app.state.store


def get_settings(request: Request) -> ServerSettings:
    """Return the server settings attached to the running application."""
    return request.app.state.settings


# ----------------------------------------------------------------------
#  GET /api/organizations
# ----------------------------------------------------------------------
@router.get("")
async def list_organizations(
    store: DirectoryStore = Depends(get_store),
    settings: ServerSettings = Depends(get_settings),
) -> JSONResponse:
    """Return every organization, newest first."""
    if settings.simulated_latency_seconds > 0:
        await asyncio.sleep(settings.simulated_latency_seconds)
    return JSONResponse([organization.to_payload() for organization in store.list_all()])


# ----------------------------------------------------------------------
#  POST /api/organizations
# ----------------------------------------------------------------------
@router.post("")
async def create_organization(
    request: Request,
    store: DirectoryStore = Depends(get_store),
) -> JSONResponse:
    """
    Create an organization from ``{name, category, description?, website?, country?}``.

    Returns 400 with ``{"error": ...}`` when name or category is missing, 500 when the
    body cannot be read, and 201 with the new organization otherwise.
    """
    try:
        draft = OrganizationDraft.model_validate(await request.json())
        organization = store.create(draft)
    except ValidationError as e:
        return JSONResponse({"error": e.message}, status_code=400)
    except Exception as e:
        LOGGER.warning("Rejected create request: %s", e)
        return JSONResponse({"error": CREATE_FAILED_MESSAGE}, status_code=500)
    return JSONResponse(organization.to_payload(), status_code=201)


# ----------------------------------------------------------------------
#  POST /api/organizations/submissions
# ----------------------------------------------------------------------
@router.post("/submissions")
async def submit_application(
    request: Request,
    store: DirectoryStore = Depends(get_store),
) -> JSONResponse:
    """
    List an organization from a wizard application, pending verification.

    Returns 400 with ``{"error": ..., "fields": {...}}`` when the application is invalid.
    """
    try:
        payload = await request.json()
    except ValueError as e:
        LOGGER.warning("Rejected submission body: %s", e)
        return JSONResponse({"error": CREATE_FAILED_MESSAGE}, status_code=500)

    try:
        application = parse_application(payload)
    except ValidationError as e:
        return JSONResponse({"error": e.message, "fields": e.fields}, status_code=400)

    organization = store.submit(application)
    return JSONResponse(organization.to_payload(), status_code=201)


def create_app(
    store: Optional[DirectoryStore] = None,
    settings: Optional[ServerSettings] = None,
) -> FastAPI:
    """Build the FastAPI application around ``store``.

    Args:
        store: Directory to serve; a new one is created (seeded per ``settings.seed``)
            when omitted.
        settings: Server settings; defaults apply when omitted.
    """
    settings = settings or ServerSettings()
    if store is None:
        store = DirectoryStore(seed_organizations() if settings.seed else ())

    app = FastAPI(title="PhilanthroHub")
    app.state.store = store
    app.state.settings = settings
    app.include_router(router)
    LOGGER.info("Directory service ready with %d organizations.", len(store))
    return app


__all__ = ["create_app", "get_settings", "get_store", "router"]
