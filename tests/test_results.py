import unittest

from resticapi.core.errors import OutputDecodingError, ToolReportedError
from resticapi.core.results import Failure, InvocationResult, Success, classify


class ClassifyTests(unittest.TestCase):
    def test_nonzero_exit_embeds_stderr(self):
        result = InvocationResult(False, b"", b"Fatal: repository not found\n", 1)
        outcome = classify(result, expect_json=True)
        self.assertIsInstance(outcome, Failure)
        self.assertEqual(outcome.status_code, 500)
        self.assertIn("repository not found", outcome.message)
        self.assertTrue(outcome.message.startswith("Restic error: "))

    def test_nonzero_exit_with_invalid_utf8_stderr_is_decoded_lossily(self):
        outcome = classify(InvocationResult(False, b"", b"bad \xff byte", 1), expect_json=False)
        self.assertIsInstance(outcome, Failure)
        self.assertIn("bad", outcome.message)
        self.assertIn("�", outcome.message)

    def test_json_success(self):
        outcome = classify(InvocationResult(True, b'{"total_size": 12345}', b"", 0), expect_json=True)
        self.assertEqual(outcome, Success({"total_size": 12345}))

    def test_json_expected_but_not_json(self):
        outcome = classify(InvocationResult(True, b"not-json", b"", 0), expect_json=True)
        self.assertIsInstance(outcome, Failure)
        self.assertIn("Failed to parse JSON", outcome.message)
        self.assertIs(outcome.error_type, OutputDecodingError)

    def test_invalid_utf8_is_distinguished_from_invalid_json(self):
        outcome = classify(InvocationResult(True, b'{"a": "\xff"}', b"", 0), expect_json=True)
        self.assertIsInstance(outcome, Failure)
        self.assertIn("Invalid UTF-8 sequence", outcome.message)
        self.assertNotIn("JSON", outcome.message)

    def test_success_without_json_ignores_stdout(self):
        outcome = classify(InvocationResult(True, b"removed snapshot abc\n", b"", 0), expect_json=False)
        self.assertEqual(outcome, Success(None))

    def test_classify_is_deterministic(self):
        cases = [
            (InvocationResult(True, b"[1, 2]", b"", 0), True),
            (InvocationResult(True, b"nope", b"", 0), True),
            (InvocationResult(False, b"", b"locked", 1), False),
        ]
        for result, expect_json in cases:
            self.assertEqual(classify(result, expect_json), classify(result, expect_json))

    def test_unwrap(self):
        self.assertEqual(Success([1]).unwrap(), [1])
        failure = classify(InvocationResult(False, b"", b"boom", 3), expect_json=False)
        with self.assertRaises(ToolReportedError):
            failure.unwrap()


if __name__ == "__main__":
    unittest.main()
