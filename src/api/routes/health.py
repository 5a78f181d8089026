"""
Health check API route
"""

from datetime import datetime, timezone
from fastapi import APIRouter, HTTPException, Depends

from services.posts_service import get_posts_service

router = APIRouter()

@router.get("/")
async def health_check(posts_service=Depends(get_posts_service)):
    """Health check - reports unhealthy only when the post store cannot be reached"""
    result = await posts_service.count_posts()

    if not result.success:
        raise HTTPException(status_code=503, detail=f"Health check failed: {result.error}")

    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "connected",
        "posts": result.count
    }
