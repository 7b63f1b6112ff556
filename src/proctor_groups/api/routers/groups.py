"""
API Routes for group resolution.

Endpoints
---------
- `POST /groups/resolve`: bind a snapshot to `Groups`, apply the requested
  overrides and return every serialization in one response.

The handler is synchronous and stateless; nothing is stored between calls.
"""

from __future__ import annotations

from fastapi import APIRouter

from proctor_groups.api.schemas import ResolveRequest, ResolveResponse
from proctor_groups.core.settings import get_logger
from proctor_groups.groups import Groups
from proctor_groups.overrides import build_override

router = APIRouter(prefix="/groups", tags=["Groups"])
logger = get_logger(__name__)


@router.post(
    "/resolve",
    response_model=ResolveResponse,
    summary="Resolve effective groups for a snapshot",
)
def resolve_groups(request: ResolveRequest) -> ResolveResponse:
    """
    Resolve effective values, payloads and serializations for a snapshot.

    Hold-out and forced-group options are combined the same way as in the
    CLI: the hold-out first, then forced groups.
    """
    override = build_override(request.holdout_test, request.holdout_value, request.forced)
    groups = Groups(request.snapshot, override=override)
    logger.info(
        "resolving %d tests (matrix %s)",
        len(request.snapshot.buckets),
        request.snapshot.matrix_version or "-",
    )
    return ResolveResponse(
        long_string=groups.to_long_string(),
        logging_string=groups.to_logging_string(),
        javascript_config=groups.get_javascript_config(),
        requested_config=groups.get_javascript_config(request.requested_tests),
        proctor_result=groups.get_as_proctor_result(),
    )
