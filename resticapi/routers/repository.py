from fastapi import APIRouter, Request

from resticapi.core.errors import ValidationError
from resticapi.core.helpers import error_response, get_restic, get_session, outcome_response
from resticapi.services.operations import (
    execute_operation, forget_request, snapshots_request, stats_request,
)
from resticapi.utils.logger import get_logger

logger = get_logger("RepositoryAPI")

router = APIRouter(tags=["repository"])


@router.get("/stats")
async def get_stats(request: Request):
    outcome = await execute_operation(get_session(request), get_restic(request), stats_request())
    return outcome_response(outcome)


@router.get("/snapshots")
async def list_snapshots(request: Request):
    outcome = await execute_operation(get_session(request), get_restic(request), snapshots_request())
    return outcome_response(outcome)


@router.delete("/snapshots/{snapshot_id}")
async def delete_snapshot(snapshot_id: str, request: Request):
    try:
        invocation = forget_request(snapshot_id)
    except ValidationError as e:
        return error_response(e.message, e.status_code)

    logger.info("[Forget] Deleting snapshot %s", snapshot_id)
    outcome = await execute_operation(get_session(request), get_restic(request), invocation)
    if outcome.ok:
        logger.info("[Forget] Snapshot %s deleted", snapshot_id)
    return outcome_response(outcome, {"message": "Snapshot deleted successfully"})
