"""
ResticAPI - Password file handling
The repository password reaches restic through a short-lived file so it never
shows up in the process argument list.
"""

import asyncio
import os
import tempfile
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

from resticapi.core.errors import CredentialMaterializationError
from resticapi.utils.logger import get_logger

logger = get_logger("Credentials")

PASSWORD_FILE_PREFIX = "resticapi-pw-"


@dataclass(frozen=True)
class ScopedCredential:
    path: str


def _remove(path: str) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.error(f"Could not remove password file {path}: {e}")


def _write_password_file(secret: str) -> str:
    # mkstemp: unpredictable name, mode 0600
    try:
        fd, path = tempfile.mkstemp(prefix=PASSWORD_FILE_PREFIX)
    except OSError as e:
        raise CredentialMaterializationError(f"Failed to create temp file for password: {e}") from e

    try:
        with os.fdopen(fd, "wb") as f:
            f.write(secret.encode("utf-8"))
    except OSError as e:
        _remove(path)
        raise CredentialMaterializationError(f"Failed to write password to temp file: {e}") from e
    return path


def _discard_orphan(creation: "asyncio.Future[str]") -> None:
    if creation.cancelled() or creation.exception() is not None:
        return
    _remove(creation.result())


@asynccontextmanager
async def materialize_secret(secret: str) -> AsyncIterator[ScopedCredential]:
    """Writes ``secret`` to a private temp file and deletes it on scope exit.

    The file is created in a worker thread. If the caller is cancelled while
    that thread runs, the file is removed once the thread finishes.
    """
    creation = asyncio.ensure_future(asyncio.to_thread(_write_password_file, secret))
    try:
        path = await asyncio.shield(creation)
    except asyncio.CancelledError:
        creation.add_done_callback(_discard_orphan)
        raise

    try:
        yield ScopedCredential(path=path)
    finally:
        _remove(path)
