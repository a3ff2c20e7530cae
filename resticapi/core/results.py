"""
ResticAPI - Invocation results
Raw process output and its classification into a success or failure outcome.
"""

import json
from dataclasses import dataclass
from typing import Any, Optional, Union

from resticapi.core.errors import OutputDecodingError, ResticApiError, ToolReportedError


@dataclass(frozen=True)
class InvocationRequest:
    subcommand: str
    arguments: tuple = ()
    expect_json: bool = False


@dataclass(frozen=True)
class InvocationResult:
    exit_succeeded: bool
    stdout: bytes = b""
    stderr: bytes = b""
    returncode: Optional[int] = None


@dataclass(frozen=True)
class Success:
    value: Any = None

    ok = True

    def unwrap(self) -> Any:
        return self.value


@dataclass(frozen=True)
class Failure:
    message: str
    status_code: int = 500
    error_type: type = ResticApiError

    ok = False

    def unwrap(self) -> Any:
        raise self.error_type(self.message)


OperationOutcome = Union[Success, Failure]


def classify(result: InvocationResult, expect_json: bool) -> OperationOutcome:
    """Turns restic output into an outcome. Pure: same input, same outcome."""
    if not result.exit_succeeded:
        stderr = result.stderr.decode("utf-8", errors="replace")
        return Failure(f"Restic error: {stderr}", error_type=ToolReportedError)

    if not expect_json:
        return Success(None)

    try:
        text = result.stdout.decode("utf-8")
    except UnicodeDecodeError as e:
        return Failure(f"Invalid UTF-8 sequence: {e}", error_type=OutputDecodingError)

    try:
        return Success(json.loads(text))
    except json.JSONDecodeError as e:
        return Failure(f"Failed to parse JSON: {e}", error_type=OutputDecodingError)
