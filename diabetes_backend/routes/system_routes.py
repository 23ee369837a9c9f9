from fastapi import APIRouter, Depends, HTTPException, status

from diabetes_backend.db.deps import get_store
from diabetes_backend.schemas.stats import StatsOut
from diabetes_backend.services.store import DataStore

router = APIRouter(tags=["system"])


@router.get("/api/stats", response_model=StatsOut)
def stats(store: DataStore = Depends(get_store)):
    """Counters for the admin dashboard."""
    return store.stats()


@router.get("/health")
def health(store: DataStore = Depends(get_store)):
    return {"status": "ok", "store": store.name}


@router.get("/test-db")
def test_db(store: DataStore = Depends(get_store)):
    if not store.ping():
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Database unreachable")
    return {"database": "connected", "store": store.name}
