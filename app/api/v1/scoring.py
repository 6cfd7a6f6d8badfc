from fastapi import APIRouter, HTTPException, Request

from app.core.rate_limit import rate_limit
from app.schemas.scan import (
    GapRequest,
    GapResponse,
    ScanRequest,
    ScanResponse,
    StructureRequest,
    StructureResponse,
)
from app.services.scoring_service import (
    ScoringServiceError,
    run_gap_analysis,
    run_scan,
    run_structural_check,
)

router = APIRouter()


def _raise_scoring_http_error(exc: ScoringServiceError) -> None:
    raise HTTPException(
        status_code=exc.status_code,
        detail={"code": exc.code, "message": str(exc)},
    ) from exc


@router.post("/scan", response_model=ScanResponse)
@rate_limit()
async def scan(request: Request, payload: ScanRequest):
    _ = request
    try:
        return run_scan(payload)
    except ScoringServiceError as exc:
        _raise_scoring_http_error(exc)


@router.post("/gaps", response_model=GapResponse)
@rate_limit()
async def gaps(request: Request, payload: GapRequest):
    _ = request
    try:
        return run_gap_analysis(payload)
    except ScoringServiceError as exc:
        _raise_scoring_http_error(exc)


@router.post("/structure", response_model=StructureResponse)
@rate_limit()
async def structure(request: Request, payload: StructureRequest):
    _ = request
    try:
        return run_structural_check(payload)
    except ScoringServiceError as exc:
        _raise_scoring_http_error(exc)
