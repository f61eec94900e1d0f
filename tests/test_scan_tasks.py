"""Tests for the periodic rescan Celery tasks, run synchronously."""

from unittest.mock import patch

from sqlalchemy.orm import Session

from backend.database.enums import AssetStatus, AssetType
from backend.database.models import User
from backend.database.repository import SecurityRepository
from backend.ingestion.breach_catalog import find_breaches_for_value
from backend.workers.scan_tasks import check_asset, rescan_all_assets


def test_rescan_all_assets_fans_out(repo: SecurityRepository, db_session: Session, user: User) -> None:
    first = repo.create_asset(user.id, AssetType.EMAIL, "jonathan@example.com")
    second = repo.create_asset(user.id, AssetType.DOMAIN, "example.com")
    db_session.commit()

    with patch("backend.workers.scan_tasks.check_asset") as mock_check:
        result = rescan_all_assets()

    assert result == {"status": "dispatched", "asset_count": 2}
    dispatched = {call.args[0] for call in mock_check.delay.call_args_list}
    assert dispatched == {first.id, second.id}


def test_check_asset_commits_scan(repo: SecurityRepository, db_session: Session, user: User) -> None:
    asset = repo.create_asset(user.id, AssetType.EMAIL, "jonathan@example.com")
    asset_id: str = asset.id
    db_session.commit()

    expected = find_breaches_for_value("jonathan@example.com")
    result = check_asset(asset_id)

    assert result == {"asset_id": asset_id, "new_alerts": len(expected)}

    db_session.expire_all()
    refreshed = repo.get_asset(asset_id)
    assert refreshed.breach_count == len(expected)
    assert refreshed.status == (AssetStatus.BREACHED if expected else AssetStatus.SAFE)


def test_check_asset_skips_missing_asset() -> None:
    assert check_asset("does-not-exist") == {"asset_id": "does-not-exist", "new_alerts": 0}
