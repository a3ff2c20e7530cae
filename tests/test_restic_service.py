import asyncio
import json
import os
import shutil
import tempfile
import unittest
from pathlib import Path

from resticapi.core.errors import ToolExecutionError, ToolTimeoutError
from resticapi.core.results import Failure, InvocationRequest, Success
from resticapi.core.session import RepositorySession
from resticapi.models.schemas import RepositoryConfig, ResticConfig
from resticapi.services.credentials import ScopedCredential
from resticapi.services.operations import execute_operation, stats_request
from resticapi.services.restic import ResticService

# Stand-in for restic: argv is -r LOC --password-file FILE SUBCOMMAND ARGS...
FAKE_RESTIC = """#!/bin/sh
case "$5" in
  stats)
    printf '{"repo": "%s", "file": "%s", "secret": "%s", "extra": "%s"}' "$2" "$4" "$(cat "$4")" "$6"
    ;;
  fail)
    echo "Fatal: repository not found" >&2
    exit 1
    ;;
  hang)
    exec sleep 30
    ;;
  *)
    exit 0
    ;;
esac
"""


class BuildCommandTests(unittest.TestCase):
    def test_command_layout(self):
        service = ResticService(binary="/usr/bin/restic")
        cmd = service.build_command(
            "s3:host/bucket", ScopedCredential("/tmp/pw"), "restore", ["abc123", "--target", "/data"]
        )
        self.assertEqual(cmd, [
            "/usr/bin/restic", "-r", "s3:host/bucket", "--password-file", "/tmp/pw",
            "restore", "abc123", "--target", "/data",
        ])

    def test_from_config(self):
        service = ResticService.from_config(ResticConfig(binary="restic-0.16", timeout_seconds=0))
        self.assertEqual(service.binary, "restic-0.16")
        self.assertIsNone(service.timeout_seconds)


@unittest.skipUnless(os.name == "posix" and shutil.which("sh"), "needs a POSIX shell")
class ResticServiceProcessTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        script = Path(self.tmp.name) / "restic"
        script.write_text(FAKE_RESTIC, encoding="utf-8")
        script.chmod(0o755)
        self.binary = str(script)
        self.config = RepositoryConfig(location="/srv/restic-repo", secret="s3cret")

    async def test_run_passes_location_and_password_file(self):
        service = ResticService(binary=self.binary, timeout_seconds=10)
        result = await service.run(self.config, InvocationRequest("stats", ("--json",), True))

        self.assertTrue(result.exit_succeeded)
        self.assertEqual(result.returncode, 0)
        payload = json.loads(result.stdout)
        self.assertEqual(payload["repo"], "/srv/restic-repo")
        self.assertEqual(payload["secret"], "s3cret")
        self.assertEqual(payload["extra"], "--json")
        self.assertFalse(os.path.exists(payload["file"]))

    async def test_nonzero_exit_is_a_result_not_an_exception(self):
        service = ResticService(binary=self.binary)
        result = await service.run(self.config, InvocationRequest("fail"))
        self.assertFalse(result.exit_succeeded)
        self.assertEqual(result.returncode, 1)
        self.assertIn(b"repository not found", result.stderr)

    async def test_timeout_kills_process_and_removes_password_file(self):
        seen = []

        class Recording(ResticService):
            async def invoke(inner_self, location, credential, subcommand, args):
                seen.append(credential.path)
                return await ResticService.invoke(inner_self, location, credential, subcommand, args)

        service = Recording(binary=self.binary, timeout_seconds=0.3)
        with self.assertRaises(ToolTimeoutError) as ctx:
            await service.run(self.config, InvocationRequest("hang"))
        self.assertIn("timed out", ctx.exception.message)
        self.assertEqual(len(seen), 1)
        self.assertFalse(os.path.exists(seen[0]))

    async def test_timeout_fails_operation_and_frees_session(self):
        session = RepositorySession(self.config)
        service = ResticService(binary=self.binary, timeout_seconds=0.2)

        outcome = await execute_operation(session, service, InvocationRequest("hang"))
        self.assertIsInstance(outcome, Failure)
        self.assertIs(outcome.error_type, ToolTimeoutError)
        self.assertEqual(outcome.status_code, 500)
        self.assertIn("timed out", outcome.message)
        self.assertFalse(session.busy)

        follow_up = await asyncio.wait_for(execute_operation(session, service, stats_request()), timeout=5)
        self.assertIsInstance(follow_up, Success)
        self.assertEqual(follow_up.value["repo"], "/srv/restic-repo")

    async def test_missing_binary(self):
        service = ResticService(binary=str(Path(self.tmp.name) / "no-such-restic"))
        with self.assertRaises(ToolExecutionError) as ctx:
            await service.run(self.config, InvocationRequest("stats", ("--json",), True))
        self.assertTrue(ctx.exception.message.startswith("Failed to execute restic"))
        self.assertNotIsInstance(ctx.exception, ToolTimeoutError)


if __name__ == "__main__":
    unittest.main()
