import argparse
import logging
import sys
from concurrent.futures import ProcessPoolExecutor
from contextlib import ExitStack
from pathlib import Path

from taste_engine.config import settings
from taste_engine.constants import CANDIDATE_MATCH_LIMIT
from taste_engine.domain import UserId
from taste_engine.schemas.compatibility import CandidateMatchesRequest, CandidateMatchesResponse
from taste_engine.services.matching import find_candidate_matches
from taste_engine.services.normalizer import normalize_library

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def load_request(path: str | Path) -> CandidateMatchesRequest:
    with open(path, encoding="utf-8") as f:
        return CandidateMatchesRequest.model_validate_json(f.read())


def compute_matches(
    request: CandidateMatchesRequest,
    limit: int = CANDIDATE_MATCH_LIMIT,
    workers: int | None = None,
) -> CandidateMatchesResponse:
    subject = normalize_library(request.subject.records, request.catalog)
    population = [
        (UserId(member.user_id), normalize_library(member.records, request.catalog))
        for member in request.population
    ]
    logger.info(f"Normalized {len(population)} candidate libraries.")

    with ExitStack() as stack:
        executor = None
        if workers is not None and workers > 1:
            executor = stack.enter_context(ProcessPoolExecutor(max_workers=workers))
        candidates = find_candidate_matches(
            UserId(request.subject.user_id),
            subject,
            population,
            weights=settings.scoring_weights(),
            require_shared_item=request.require_shared_item,
            limit=limit,
            favorite_threshold=settings.favorite_rating_threshold,
            executor=executor,
        )
    return CandidateMatchesResponse(candidates=candidates)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Rank a population of users by compatibility with one subject."
    )
    parser.add_argument("input", help="JSON file with subject, population and catalog.")
    parser.add_argument(
        "--output", default="-", help="Where to write ranked candidates ('-' for stdout)."
    )
    parser.add_argument(
        "--limit", type=int, default=CANDIDATE_MATCH_LIMIT, help="Max candidates to keep"
    )
    parser.add_argument(
        "--require-shared-item",
        action="store_true",
        help="Skip candidates sharing no item with the subject.",
    )
    parser.add_argument("--workers", type=int, default=None, help="Process pool size")
    args = parser.parse_args(argv)

    request = load_request(args.input)
    if args.require_shared_item:
        request = request.model_copy(update={"require_shared_item": True})

    response = compute_matches(request, limit=args.limit, workers=args.workers)
    payload = response.model_dump_json(indent=2)

    if args.output == "-":
        sys.stdout.write(payload + "\n")
    else:
        Path(args.output).write_text(payload + "\n", encoding="utf-8")
    logger.info(f"Wrote {len(response.candidates)} candidates for {request.subject.user_id}.")


if __name__ == "__main__":
    main()
