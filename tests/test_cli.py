"""Command-line entrypoint tests.

Verifies the TTY requirement and that a normal launch reaches the browser.
"""

from __future__ import annotations

import io
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest import mock

from awsome import cli


class CliEntrypointTests(unittest.TestCase):
    def test_main_requires_interactive_terminal(self) -> None:
        stderr = io.StringIO()
        with mock.patch("awsome.cli.os.isatty", return_value=False), mock.patch(
            "awsome.cli.sys.stdin"
        ), mock.patch("awsome.cli.sys.stdout"), mock.patch("awsome.cli.run_browser") as run_browser, redirect_stderr(
            stderr
        ):
            with self.assertRaises(SystemExit) as ctx:
                cli.main([])

        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("interactive terminal is required", stderr.getvalue())
        run_browser.assert_not_called()

    def test_main_launches_browser_on_tty(self) -> None:
        with mock.patch("awsome.cli.os.isatty", return_value=True), mock.patch(
            "awsome.cli.sys.stdin"
        ), mock.patch("awsome.cli.sys.stdout"), mock.patch("awsome.cli.run_browser") as run_browser:
            cli.main([])

        run_browser.assert_called_once_with()

    def test_help_exits_cleanly(self) -> None:
        stdout = io.StringIO()
        with mock.patch("awsome.cli.run_browser") as run_browser, redirect_stdout(stdout):
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["--help"])

        self.assertEqual(ctx.exception.code, 0)
        self.assertIn("usage: awsome", stdout.getvalue())
        run_browser.assert_not_called()

    def test_unknown_argument_is_rejected(self) -> None:
        with mock.patch("awsome.cli.run_browser") as run_browser, redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["--profile", "dev"])

        self.assertEqual(ctx.exception.code, 2)
        run_browser.assert_not_called()


if __name__ == "__main__":
    unittest.main()
