"""
ResticAPI - Repository operations
Maps each API operation onto a restic invocation and runs it under the
repository session.
"""

from dataclasses import replace

from resticapi.core.errors import ResticApiError, ValidationError
from resticapi.core.results import Failure, InvocationRequest, InvocationResult, OperationOutcome, classify
from resticapi.core.session import RepositorySession
from resticapi.models.schemas import RepositoryConfig
from resticapi.services.restic import ResticService
from resticapi.utils.logger import get_logger

logger = get_logger("Operations")

REDACTED = "***"
# shorter passwords would match ordinary words in restic output
MIN_REDACT_LENGTH = 8


def stats_request() -> InvocationRequest:
    return InvocationRequest("stats", ("--json",), expect_json=True)


def snapshots_request() -> InvocationRequest:
    return InvocationRequest("snapshots", ("--json",), expect_json=True)


def forget_request(snapshot_id: str) -> InvocationRequest:
    return InvocationRequest("forget", (_require_snapshot_id(snapshot_id), "--prune"))


def restore_request(snapshot_id: str, target_dir: str) -> InvocationRequest:
    if not (target_dir or "").strip():
        raise ValidationError("Target directory is required")
    return InvocationRequest("restore", (_require_snapshot_id(snapshot_id), "--target", target_dir))


def _require_snapshot_id(snapshot_id: str) -> str:
    if not (snapshot_id or "").strip():
        raise ValidationError("Snapshot ID is required")
    return snapshot_id


def redact_secret(text: str, secret: str) -> str:
    if len(secret) >= MIN_REDACT_LENGTH and secret in text:
        return text.replace(secret, REDACTED)
    return text


def _redact_stderr(result: InvocationResult, secret: str) -> InvocationResult:
    needle = secret.encode("utf-8")
    if len(secret) < MIN_REDACT_LENGTH or needle not in result.stderr:
        return result
    return replace(result, stderr=result.stderr.replace(needle, REDACTED.encode("utf-8")))


async def execute_operation(
    session: RepositorySession,
    service: ResticService,
    request: InvocationRequest,
) -> OperationOutcome:
    """Runs one restic command under the session lock and classifies its output."""

    async def _run(config: RepositoryConfig) -> OperationOutcome:
        try:
            result = await service.run(config, request)
        except ResticApiError as e:
            logger.error("[%s] %s", request.subcommand, redact_secret(e.message, config.secret))
            return Failure(redact_secret(e.message, config.secret), status_code=e.status_code, error_type=type(e))

        outcome = classify(_redact_stderr(result, config.secret), request.expect_json)
        if isinstance(outcome, Failure):
            logger.error("[%s] code=%s %s", request.subcommand, result.returncode, outcome.message)
        return outcome

    return await session.with_session(_run)
