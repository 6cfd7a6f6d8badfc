from fastapi import APIRouter

from app.scoring.constants import get_scoring_constants

router = APIRouter()


@router.get("/health", summary="Health Check", description="Check the health status of the scoring service.")
async def health_check():
    return {"status": "healthy", "algorithm_version": get_scoring_constants().algorithm_version}
