# File: fundiflow/api/v1/routes_dashboard.py

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from fundiflow.api.deps import get_current_user, get_db, require_admin
from fundiflow.models.base import to_naive_utc
from fundiflow.models.user import User
from fundiflow.services.cache import app_cache
from fundiflow.services.cached_queries import get_cached_dashboard_stats, get_cached_report_data

router = APIRouter()


@router.get("/stats", summary="Dashboard statistics")
def dashboard_stats(db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    return get_cached_dashboard_stats(db)


@router.get("/report", summary="Report data for a date range")
def report(
    start: datetime,
    end: datetime,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    """
    Projects created between ``start`` and ``end`` (inclusive) with their
    status and monthly breakdown.
    """
    start, end = to_naive_utc(start), to_naive_utc(end)
    if start > end:
        raise HTTPException(status_code=400, detail="start must not be after end")
    return get_cached_report_data(db, start, end)


@router.get("/cache", summary="Cache statistics")
def cache_stats(_: User = Depends(require_admin)):
    return app_cache.stats()


@router.delete("/cache", summary="Clear the cache")
def clear_cache(_: User = Depends(require_admin)):
    app_cache.clear()
    return {"cleared": True}


@router.post("/cache/cleanup", summary="Remove expired cache entries")
def cleanup_cache(_: User = Depends(require_admin)):
    return {"removed": app_cache.cleanup()}
