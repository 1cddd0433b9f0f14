from fastapi import APIRouter

from taste_engine.dependencies.engine import normalize_or_422
from taste_engine.schemas.profile import TasteProfile, TasteProfileRequest
from taste_engine.services.profile import build_taste_profile

router = APIRouter(tags=["profile"])


@router.post(
    "/taste-profile",
    response_model=TasteProfile,
    summary="Build Taste Profile",
    responses={422: {"description": "Malformed library record"}},
)
def read_taste_profile(payload: TasteProfileRequest) -> TasteProfile:
    library = normalize_or_422(payload.records, payload.catalog)
    return build_taste_profile(library, now=payload.now)
