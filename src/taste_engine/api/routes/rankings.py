from fastapi import APIRouter

from taste_engine.dependencies.engine import normalize_or_422
from taste_engine.domain import UserId
from taste_engine.schemas.ranking import (
    Leaderboard,
    RankingRequest,
    RankingResponse,
    TopRatersRequest,
)
from taste_engine.services.ranking import build_leaderboard, find_subject_rank, rank_subjects

router = APIRouter(tags=["rankings"])


@router.post(
    "/rankings",
    response_model=RankingResponse,
    summary="Rank Scored Subjects",
    description=(
        "Orders subjects by descending score with stable tie-breaking. The subject rank "
        "is computed over the full list, not the returned slice."
    ),
)
def rank_scored_subjects(payload: RankingRequest) -> RankingResponse:
    entries = rank_subjects(payload.items, limit=payload.limit)
    subject_rank = (
        find_subject_rank(payload.items, payload.subject_id) if payload.subject_id else None
    )
    return RankingResponse(entries=entries, subject_rank=subject_rank)


@router.post(
    "/leaderboards/top-raters",
    response_model=Leaderboard,
    summary="Top Raters Leaderboard",
    description="Counts library entries per user inside the period window and ranks them.",
    responses={422: {"description": "Malformed library record"}},
)
def read_top_raters(payload: TopRatersRequest) -> Leaderboard:
    libraries = {
        UserId(member.user_id): normalize_or_422(member.records, payload.catalog)
        for member in payload.population
    }
    return build_leaderboard(
        libraries,
        period=payload.period,
        subject_id=payload.subject_id,
        now=payload.now,
        limit=payload.limit,
    )
