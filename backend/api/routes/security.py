"""FastAPI routes for the security score, checklist and breach catalog.

The score is recomputed on every request from the user's current assets,
alerts and checklist; nothing about it is stored.
"""

import logging
from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict

from backend.api.dependencies import get_current_user, get_repository
from backend.checklist.catalog import get_checklist_stats
from backend.database.enums import ChecklistCategory, Importance, Trend
from backend.database.models import DataBreach, SecurityChecklist, User
from backend.database.repository import SecurityRepository
from backend.scoring.score_engine import SecurityScore, calculate_security_score

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/security", tags=["Security"])


# -------------------------------------------------------------------------
# Pydantic Schemas
# -------------------------------------------------------------------------

class ScoreComponentResponse(BaseModel):
    score: int
    weight: int
    issues: list[str]
    recommendations: list[str]

    model_config = ConfigDict(from_attributes=True)


class ScoreBreakdownResponse(BaseModel):
    passwords: ScoreComponentResponse
    mfa: ScoreComponentResponse
    exposure: ScoreComponentResponse
    hygiene: ScoreComponentResponse

    model_config = ConfigDict(from_attributes=True)


class SecurityScoreResponse(BaseModel):
    """Composite 0-100 score with its four weighted components."""
    overall: int
    label: str
    breakdown: ScoreBreakdownResponse
    last_updated: datetime
    trend: Trend
    trend_percentage: int

    model_config = ConfigDict(from_attributes=True)


class ChecklistItemResponse(BaseModel):
    id: str
    category: ChecklistCategory
    title: str
    description: str
    is_completed: bool
    completed_at: Optional[datetime]
    importance: Importance

    model_config = ConfigDict(from_attributes=True)


class ChecklistResponse(BaseModel):
    id: str
    last_updated: datetime
    completed_count: int
    total_count: int
    items: list[ChecklistItemResponse]

    model_config = ConfigDict(from_attributes=True)


class ChecklistItemUpdateRequest(BaseModel):
    is_completed: bool


class CompletionStats(BaseModel):
    total: int
    completed: int


class OverallStats(CompletionStats):
    percentage: int


class ChecklistStatsResponse(BaseModel):
    overall: OverallStats
    by_category: dict[str, CompletionStats]
    by_importance: dict[str, CompletionStats]


class BreachResponse(BaseModel):
    """Catalog entry for a historical breach."""
    id: str
    name: str
    domain: Optional[str]
    breach_date: Optional[date]
    added_date: Optional[date]
    modified_date: Optional[date]
    pwn_count: int
    description: str
    data_classes: list[str]
    is_verified: bool
    is_fabricated: bool
    is_sensitive: bool
    is_retired: bool
    is_spam_list: bool

    model_config = ConfigDict(from_attributes=True)


# -------------------------------------------------------------------------
# API Routes
# -------------------------------------------------------------------------

@router.get("/score", response_model=SecurityScoreResponse)
def get_security_score(
    repo: SecurityRepository = Depends(get_repository),
    current_user: User = Depends(get_current_user),
) -> SecurityScore:
    """Compute the caller's security score from their current state."""
    return calculate_security_score(repo, current_user.id)


@router.get("/checklist", response_model=ChecklistResponse)
def get_checklist(
    repo: SecurityRepository = Depends(get_repository),
    current_user: User = Depends(get_current_user),
) -> SecurityChecklist:
    """Return the caller's checklist, creating the default one on first use."""
    return repo.get_security_checklist(current_user.id)


@router.get("/checklist/stats", response_model=ChecklistStatsResponse)
def get_checklist_statistics(
    repo: SecurityRepository = Depends(get_repository),
    current_user: User = Depends(get_current_user),
) -> dict:
    checklist = repo.get_security_checklist(current_user.id)
    return get_checklist_stats(checklist.items)


@router.put("/checklist/{item_id}", response_model=ChecklistResponse)
def update_checklist_item(
    item_id: str,
    request: ChecklistItemUpdateRequest,
    repo: SecurityRepository = Depends(get_repository),
    current_user: User = Depends(get_current_user),
) -> SecurityChecklist:
    """Mark a checklist item completed or not completed.

    Raises:
        HTTPException: 404 if the item is not on the caller's checklist.
    """
    checklist = repo.update_checklist_item(current_user.id, item_id, request.is_completed)
    if not checklist:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Checklist item not found.")

    logger.info(f"User {current_user.id} set checklist item {item_id} completed={request.is_completed}")
    return checklist


@router.get("/breaches", response_model=list[BreachResponse])
def list_breaches(
    repo: SecurityRepository = Depends(get_repository),
    current_user: User = Depends(get_current_user),
) -> list[DataBreach]:
    return repo.list_breaches()


@router.get("/breaches/{breach_id}", response_model=BreachResponse)
def get_breach(
    breach_id: str,
    repo: SecurityRepository = Depends(get_repository),
    current_user: User = Depends(get_current_user),
) -> DataBreach:
    breach = repo.get_breach(breach_id)
    if not breach:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Breach not found.")
    return breach
