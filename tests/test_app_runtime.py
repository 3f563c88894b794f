"""Wiring tests for ``awsome.runtime.app.run_browser``.

The loop itself is replaced; these tests check what the composition layer
hands to it and that the background connection is started and torn down.
"""

from __future__ import annotations

import unittest
from unittest import mock

from awsome.runtime import app
from awsome.runtime.state import LoadingPhase
from awsome.services import ServiceKind


class RunBrowserWiringTests(unittest.TestCase):
    def _run(self, loop_side_effect, **kwargs):
        with mock.patch("awsome.runtime.app.setup_logging", return_value=None), mock.patch(
            "awsome.runtime.app.load_favorites", return_value={ServiceKind.IAM}
        ), mock.patch("awsome.runtime.app.load_aws_profile", return_value="cfg-profile"), mock.patch(
            "awsome.runtime.app.load_aws_region", return_value="cfg-region"
        ), mock.patch("awsome.runtime.app.AwsClient") as client_cls, mock.patch(
            "awsome.runtime.app.TerminalController"
        ) as terminal_cls, mock.patch("awsome.runtime.app.sys.stdin") as stdin, mock.patch(
            "awsome.runtime.app.sys.stdout"
        ) as stdout, mock.patch(
            "awsome.runtime.app.run_main_loop", side_effect=loop_side_effect
        ) as loop_mock:
            stdin.fileno.return_value = 0
            stdout.fileno.return_value = 1
            app.run_browser(**kwargs)
        return client_cls, terminal_cls, loop_mock

    def test_connects_in_background_and_passes_callbacks(self) -> None:
        seen = {}

        def fake_loop(state, terminal, stdin_fd, timing, callbacks):
            orchestrator = callbacks.poll_fetch.__self__
            self.assertEqual(state.loading_phase, LoadingPhase.LOADING)
            self.assertTrue(orchestrator.wait(timeout=5))
            self.assertFalse(callbacks.poll_fetch())
            seen["state"] = state
            seen["stdin_fd"] = stdin_fd
            seen["timing"] = timing
            seen["callbacks"] = callbacks

        client_cls, terminal_cls, _loop = self._run(fake_loop)

        client_cls.connect.assert_called_once_with(profile="cfg-profile", region="cfg-region")
        terminal_cls.assert_called_once_with(0, 1)
        state = seen["state"]
        self.assertEqual(state.loading_phase, LoadingPhase.LOADED)
        self.assertEqual(state.status_message, "AWS client initialized. Press r to load resources.")
        self.assertEqual([s.favorite for s in state.services], [False, False, True, False, False, False, False, False])
        self.assertEqual(seen["stdin_fd"], 0)
        self.assertEqual(seen["timing"].input_poll_ms, 100)
        self.assertEqual(seen["callbacks"].list_view_rows(24), 19)

    def test_explicit_profile_and_region_override_config(self) -> None:
        def fake_loop(state, terminal, stdin_fd, timing, callbacks):
            callbacks.poll_fetch.__self__.wait(timeout=5)

        client_cls, _terminal, _loop = self._run(fake_loop, profile="prod", region="us-west-2")

        client_cls.connect.assert_called_once_with(profile="prod", region="us-west-2")

    def test_executor_is_shut_down_when_loop_raises(self) -> None:
        captured = {}

        def fake_loop(state, terminal, stdin_fd, timing, callbacks):
            orchestrator = callbacks.poll_fetch.__self__
            orchestrator.wait(timeout=5)
            captured["executor"] = orchestrator._executor
            raise RuntimeError("terminal went away")

        with self.assertRaises(RuntimeError):
            self._run(fake_loop)

        with self.assertRaises(RuntimeError):
            captured["executor"].submit(lambda: None)


if __name__ == "__main__":
    unittest.main()
