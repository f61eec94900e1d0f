"""FastAPI routes for managing monitored assets.

Adding or re-checking an asset runs a breach scan inline, so the response
already carries the settled status and breach count.
"""

import logging
from datetime import datetime
from typing import Any, Optional

from email_validator import EmailNotValidError, validate_email
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from backend.api.dependencies import get_current_user, get_repository
from backend.database.enums import AssetStatus, AssetType
from backend.database.models import MonitoredAsset, User
from backend.database.repository import DuplicateAssetError, SecurityRepository
from backend.ingestion.scanner import scan_asset
from backend.utils.crypto import mask_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/assets", tags=["Asset Monitoring"])


# -------------------------------------------------------------------------
# Pydantic Schemas
# -------------------------------------------------------------------------

class AssetCreateRequest(BaseModel):
    """Payload for adding a new monitored asset."""
    type: AssetType
    value: str = Field(min_length=1, max_length=255)
    label: Optional[str] = Field(default=None, max_length=100)


class AssetResponse(BaseModel):
    """Serialization schema for a monitored asset, as seen by its owner."""
    id: str
    type: AssetType
    value: str
    preview: str
    label: Optional[str]
    added_at: datetime
    last_checked: datetime
    breach_count: int
    status: AssetStatus


class AssetCheckResponse(BaseModel):
    asset: AssetResponse
    new_alerts: int


def serialize_asset(asset: MonitoredAsset) -> dict[str, Any]:
    """Decrypt an asset for its owner, with a masked preview for display."""
    value: str = asset.value
    return {
        "id": asset.id,
        "type": asset.type,
        "value": value,
        "preview": mask_email(value) if asset.type == AssetType.EMAIL else value,
        "label": asset.label,
        "added_at": asset.added_at,
        "last_checked": asset.last_checked,
        "breach_count": asset.breach_count,
        "status": asset.status,
    }


# -------------------------------------------------------------------------
# API Routes
# -------------------------------------------------------------------------

@router.get("/", response_model=list[AssetResponse])
def list_assets(
    repo: SecurityRepository = Depends(get_repository),
    current_user: User = Depends(get_current_user),
) -> list[dict[str, Any]]:
    return [serialize_asset(asset) for asset in repo.get_assets_by_user(current_user.id)]


@router.post("/", response_model=AssetResponse, status_code=status.HTTP_201_CREATED)
def add_asset(
    request: AssetCreateRequest,
    repo: SecurityRepository = Depends(get_repository),
    current_user: User = Depends(get_current_user),
) -> dict[str, Any]:
    """Start monitoring an asset and scan it immediately.

    Args:
        request: The parsed, validated JSON payload.
        repo: Repository bound to the request session.
        current_user: The resolved caller.

    Returns:
        The new asset after its first scan.

    Raises:
        HTTPException: If an email value is invalid (400) or the asset is
            already monitored (409).
    """
    value: str = request.value.strip()
    if request.type == AssetType.EMAIL:
        try:
            value = validate_email(value, check_deliverability=False).normalized.lower()
        except EmailNotValidError as e:
            logger.warning(f"Rejecting invalid email asset: {e}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    try:
        asset = repo.create_asset(current_user.id, request.type, value, label=request.label)
    except DuplicateAssetError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    scan_asset(repo, asset)
    logger.info(f"User {current_user.id} started monitoring {request.type.value} asset {asset.id}")
    return serialize_asset(asset)


@router.post("/{asset_id}/check", response_model=AssetCheckResponse)
def check_asset(
    asset_id: str,
    repo: SecurityRepository = Depends(get_repository),
    current_user: User = Depends(get_current_user),
) -> dict[str, Any]:
    """Re-scan one of the caller's assets against the breach catalog."""
    asset = repo.get_asset(asset_id, current_user.id)
    if not asset:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Asset not found.")

    new_alerts: int = scan_asset(repo, asset)
    return {"asset": serialize_asset(asset), "new_alerts": new_alerts}


@router.delete("/{asset_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_asset(
    asset_id: str,
    repo: SecurityRepository = Depends(get_repository),
    current_user: User = Depends(get_current_user),
) -> None:
    """Stop monitoring an asset. Its alerts are kept.

    Raises:
        HTTPException: 404 if the asset does not belong to the caller.
    """
    if not repo.delete_asset(asset_id, current_user.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Asset not found.")
