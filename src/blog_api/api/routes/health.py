"""
Health check API route
"""

from fastapi import APIRouter, HTTPException

from blog_api.database.connection import get_post_store
from blog_api.utils.helpers import utc_now

router = APIRouter()


@router.get("")
async def health_check():
    """Report whether the blog post store is reachable"""
    store = get_post_store()
    if store is None:
        raise HTTPException(status_code=503, detail="Health check failed: database not initialized")

    try:
        await store.ping()
    except Exception as e:
        raise HTTPException(status_code=503, detail=f"Health check failed: {str(e)}")

    return {
        "status": "healthy",
        "timestamp": utc_now().isoformat(),
        "database": "connected",
        "driver": store.driver_name
    }
