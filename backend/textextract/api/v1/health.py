from fastapi import APIRouter

from textextract.config import settings

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check():
    return {"status": "healthy", "service": "text-extractor", "version": settings.app_version}
