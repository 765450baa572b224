"""
REST endpoints for image matching and experience lookup.
"""
from fastapi import APIRouter, UploadFile, File, HTTPException
from fastapi.responses import JSONResponse
import logging

from arview.config import Settings
from arview.errors import DecodeError, EmptyInputError, ExperienceError, ExperienceNotFoundError
from arview.experiences import ExperienceStore
from arview.models import CatalogMatchResponse
from arview.similarity import score, rank_catalog


router = APIRouter()
settings = Settings()
store = ExperienceStore.from_path(settings.EXPERIENCES_PATH)
logger = logging.getLogger(__name__)


async def _read_upload(file: UploadFile) -> bytes:
    try:
        return await file.read()
    except Exception as e:
        logger.exception("[api] upload read failed")
        raise HTTPException(status_code=400, detail=f"Upload failed: {e}")


def _lookup(experience_id: str):
    try:
        return store.get(experience_id)
    except ExperienceNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ExperienceError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/experiences/{experience_id}")
async def get_experience(experience_id: str):
    """
    Fetch the marker and overlay video of one AR experience.

    Returns:
        JSONResponse: Experience record.
    """
    exp = _lookup(experience_id)
    return JSONResponse(exp.model_dump())


@router.post("/compare")
async def compare(
    target: UploadFile = File(...),
    candidate: UploadFile = File(...),
):
    """
    Score how well `candidate` matches `target`.

    Args:
        target: Reference image upload.
        candidate: Photo to check.

    Returns:
        JSONResponse: MatchResult payload.
    """
    logger.debug(f"[api] /compare target={target.filename} candidate={candidate.filename}")
    target_bytes = await _read_upload(target)
    candidate_bytes = await _read_upload(candidate)
    try:
        result = await score(target_bytes, candidate_bytes, timeout=settings.HTTP_TIMEOUT)
    except (DecodeError, EmptyInputError) as e:
        logger.exception("[api] /compare decode failed")
        raise HTTPException(status_code=422, detail=str(e))
    return JSONResponse(result.model_dump(mode="json"))


@router.post("/experiences/{experience_id}/match")
async def match_experience(experience_id: str, file: UploadFile = File(...)):
    """
    Score an uploaded photo against one experience's marker image.

    Returns:
        JSONResponse: MatchResult payload.
    """
    exp = _lookup(experience_id)
    logger.debug(f"[api] /experiences/{experience_id}/match filename={file.filename}")
    candidate_bytes = await _read_upload(file)
    try:
        result = await score(exp.marker_url, candidate_bytes, timeout=settings.HTTP_TIMEOUT)
    except (DecodeError, EmptyInputError) as e:
        logger.exception("[api] experience match decode failed")
        raise HTTPException(status_code=422, detail=str(e))
    return JSONResponse(result.model_dump(mode="json"))


@router.post("/match")
async def match_catalog(file: UploadFile = File(...)):
    """
    Rank every experience marker against an uploaded photo, best first.

    Returns:
        JSONResponse: CatalogMatchResponse payload.
    """
    logger.debug(f"[api] /match filename={file.filename} catalog={len(store)}")
    candidate_bytes = await _read_upload(file)
    try:
        matches = await rank_catalog(candidate_bytes, store.all(), timeout=settings.HTTP_TIMEOUT)
    except (DecodeError, EmptyInputError) as e:
        logger.exception("[api] /match decode failed")
        raise HTTPException(status_code=422, detail=str(e))
    payload = CatalogMatchResponse(matches=matches, best=(matches[0] if matches else None))
    return JSONResponse(payload.model_dump(mode="json"))
