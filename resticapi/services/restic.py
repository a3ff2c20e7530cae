"""
ResticAPI - Restic CLI Service
Wrapper around the restic binary using asyncio subprocesses.
"""

import asyncio
from typing import Optional, Sequence

from resticapi.core.errors import ToolExecutionError, ToolTimeoutError
from resticapi.core.results import InvocationRequest, InvocationResult
from resticapi.models.schemas import RepositoryConfig, ResticConfig
from resticapi.services.credentials import ScopedCredential, materialize_secret
from resticapi.utils.logger import get_logger

logger = get_logger("ResticCLI")


class ResticService:
    def __init__(self, binary: str = "restic", timeout_seconds: Optional[float] = None):
        self.binary = binary
        self.timeout_seconds = timeout_seconds or None

    @classmethod
    def from_config(cls, config: ResticConfig) -> "ResticService":
        return cls(binary=config.binary, timeout_seconds=config.timeout_seconds)

    def build_command(
        self,
        location: str,
        credential: ScopedCredential,
        subcommand: str,
        args: Sequence[str],
    ) -> list[str]:
        return [
            self.binary,
            "-r", location,
            "--password-file", credential.path,
            subcommand,
            *args,
        ]

    async def invoke(
        self,
        location: str,
        credential: ScopedCredential,
        subcommand: str,
        args: Sequence[str],
    ) -> InvocationResult:
        """Runs one restic command to completion and captures its output."""
        cmd = self.build_command(location, credential, subcommand, args)
        logger.info(f"Executing: {' '.join(cmd)}")

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except (OSError, ValueError) as e:
            # ValueError: an argument holds a NUL byte
            logger.error(f"Could not start {self.binary}: {e}")
            raise ToolExecutionError(f"Failed to execute restic: {e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            await self._kill(process)
            logger.error(f"restic {subcommand} timed out after {self.timeout_seconds}s (pid={process.pid})")
            raise ToolTimeoutError(
                f"Failed to execute restic: {subcommand} timed out after {self.timeout_seconds} seconds"
            )
        except asyncio.CancelledError:
            await self._kill(process)
            raise

        logger.info(f"restic {subcommand} finished with code {process.returncode}")
        return InvocationResult(
            exit_succeeded=process.returncode == 0,
            stdout=stdout or b"",
            stderr=stderr or b"",
            returncode=process.returncode,
        )

    async def run(self, config: RepositoryConfig, request: InvocationRequest) -> InvocationResult:
        """Invokes restic with the password file alive for the whole process lifetime."""
        async with materialize_secret(config.secret) as credential:
            return await self.invoke(config.location, credential, request.subcommand, request.arguments)

    @staticmethod
    async def _kill(process: asyncio.subprocess.Process) -> None:
        if process.returncode is not None:
            return
        try:
            process.kill()
        except ProcessLookupError:
            return
        await process.wait()
