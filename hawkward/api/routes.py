"""
HTTP routes.

Thin translation from requests to store and monitor operations; all
failure handling lives in the components and the exception handlers
registered in ``hawkward.api.app``.
"""

import json
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from hawkward.api.schemas import (
    HealthResponse,
    HeartbeatResponse,
    ImportResponse,
    SaveStoreRequest,
    SuccessResponse,
    SystemSettingsRequest,
    SystemSettingsResponse,
    TabClosedResponse,
    seconds,
)
from hawkward.models import StoreName, project_balances
from hawkward.orchestrator import AppComponents
from hawkward.services.storage import ValidationFailureError


router = APIRouter(prefix="/api")


def get_components(request: Request) -> AppComponents:
    return request.app.state.components


# =============================================================================
# DOCUMENT
# =============================================================================

@router.get("/data")
async def load_document(components: AppComponents = Depends(get_components)) -> dict[str, Any]:
    """Whole normalized document; recovers from backup when corrupt."""
    document = await components.store.read_document()
    return document.to_json_dict()


@router.post("/data", response_model=SuccessResponse)
async def save_store(
    payload: SaveStoreRequest,
    components: AppComponents = Depends(get_components),
) -> SuccessResponse:
    if not payload.store_name:
        raise ValidationFailureError("storeName is required")

    key = str(payload.key) if payload.key is not None else None
    await components.store.write_store(payload.store_name, payload.data, key)
    return SuccessResponse()


@router.post("/import", response_model=ImportResponse)
async def import_document(
    request: Request,
    components: AppComponents = Depends(get_components),
) -> ImportResponse:
    """Replace the whole document; a safety backup is taken first."""
    try:
        raw = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationFailureError("Invalid JSON data", details=str(e)) from e

    await components.store.import_document(raw)
    return ImportResponse(message="Database restored successfully (Safety backup created)")


@router.get("/timeline/{key}/projection")
async def timeline_projection(
    key: str,
    components: AppComponents = Depends(get_components),
):
    """Months of one timeline with their derived running balance."""
    timeline = await components.store.read_store(StoreName.TIMELINE.value)
    if key not in timeline:
        return JSONResponse(status_code=404, content={"error": f"Timeline not found: {key}"})

    try:
        projection = project_balances(timeline[key])
    except ValidationError as e:
        raise ValidationFailureError(
            f"Invalid timeline data: {key}",
            details=str(e),
        ) from e
    return projection.model_dump(mode="json", by_alias=True)


# =============================================================================
# SESSION LIFECYCLE
# =============================================================================

@router.post("/heartbeat", response_model=HeartbeatResponse)
async def heartbeat(components: AppComponents = Depends(get_components)) -> HeartbeatResponse:
    components.monitor.on_heartbeat()
    return HeartbeatResponse()


@router.post("/settings/system", response_model=SystemSettingsResponse)
async def update_system_settings(
    payload: SystemSettingsRequest,
    components: AppComponents = Depends(get_components),
) -> SystemSettingsResponse:
    timeout, enabled = components.monitor.on_config_change(
        timeout_seconds=payload.timeout,
        enabled=payload.enabled,
    )
    return SystemSettingsResponse(timeout=seconds(timeout), enabled=enabled)


@router.post("/tab-closed", response_model=TabClosedResponse)
async def tab_closed(components: AppComponents = Depends(get_components)) -> TabClosedResponse:
    components.monitor.on_tab_closed()
    return TabClosedResponse()


@router.get("/health", response_model=HealthResponse)
async def health(components: AppComponents = Depends(get_components)) -> HealthResponse:
    monitor = components.monitor
    return HealthResponse(
        monitor=monitor.state.value,
        timeout=seconds(monitor.timeout_seconds),
        enabled=monitor.enabled,
        suppressed=monitor.suppressed,
        pending_writes=components.store.write_queue.pending,
    )
