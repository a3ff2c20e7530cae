import time

from fastapi import APIRouter, Request

from resticapi.core.errors import ValidationError
from resticapi.core.helpers import error_response, get_restic, get_session, outcome_response
from resticapi.models.schemas import RestoreRequest
from resticapi.services.operations import execute_operation, restore_request
from resticapi.utils.logger import get_logger

logger = get_logger("RestoreAPI")

router = APIRouter(tags=["restore"])


@router.post("/restore")
async def restore_snapshot(req: RestoreRequest, request: Request):
    # validated before touching the session: a bad request never waits on the lock
    try:
        invocation = restore_request(req.snapshot_id, req.target_dir)
    except ValidationError as e:
        logger.warning("[Restore] Rejected snapshot=%r target=%r: %s", req.snapshot_id, req.target_dir, e.message)
        return error_response(e.message, e.status_code)

    started = time.monotonic()
    logger.info("[Restore] Start snapshot=%s target=%s", req.snapshot_id, req.target_dir)
    outcome = await execute_operation(get_session(request), get_restic(request), invocation)
    logger.info(
        "[Restore] End snapshot=%s result=%s duration_s=%s",
        req.snapshot_id,
        "OK" if outcome.ok else "ERROR",
        round(time.monotonic() - started, 2),
    )
    return outcome_response(outcome, {"message": "Snapshot restored successfully"})
