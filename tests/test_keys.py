from __future__ import annotations

import unittest
from concurrent.futures import Executor, Future

import boto3
from botocore.stub import Stubber

from awsome.input import KeyComboBinding, KeyComboRegistry, KeyDispatcher
from awsome.rows import Row, RowRole, message_rows
from awsome.runtime.app import build_session
from awsome.runtime.state import LoadingPhase, ModalMode, SessionState
from awsome.services import Column, EntryClass, ServiceBackend, ServiceKind
from awsome.services.ecs import EcsService


class _ImmediateExecutor(Executor):
    def submit(self, fn, /, *args, **kwargs):
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except BaseException as exc:
            future.set_exception(exc)
        return future


class _Buckets(ServiceBackend):
    kind = ServiceKind.S3
    hierarchical = True

    def __init__(self) -> None:
        self.listed: list[str | None] = []
        self.described: list[tuple[str, str | None]] = []

    def list(self, path):
        self.listed.append(path)
        if path is None:
            return [{"name": "alpha", "dir": True}]
        if path == "alpha/":
            return [{"name": "logs/", "dir": True}, {"name": "readme.md"}]
        return [{"name": "app.log"}]

    def describe(self, entry_id, path=None):
        self.described.append((entry_id, path))
        return [("Name", entry_id)]

    def columns(self, path):
        return (Column("Name", 4),)

    def cells(self, record):
        return (record["name"],)

    def entry_id(self, record):
        return record["name"]

    def classify(self, record):
        return EntryClass.CONTAINER if record.get("dir") else EntryClass.LEAF


class _Client:
    def __init__(self, backend) -> None:
        self._backend = backend

    def backend(self, kind):
        return self._backend


def _session(backend=None, connected=True):
    state = SessionState(active_service=1)
    context, orchestrator = build_session(
        state,
        executor=_ImmediateExecutor(),
        on_favorites_changed=lambda _services: None,
    )
    if connected:
        orchestrator.client = _Client(backend or _Buckets())
    return state, KeyDispatcher(context), orchestrator


def _press(dispatcher: KeyDispatcher, orchestrator, *keys: str) -> list[bool]:
    results = []
    for key in keys:
        results.append(dispatcher.handle(key))
        orchestrator.poll()
    return results


class KeyRegistryTests(unittest.TestCase):
    def test_unbound_key_dispatches_to_none(self) -> None:
        registry = KeyComboRegistry(KeyComboBinding(("a", "b"), lambda: True))

        self.assertTrue(registry.dispatch("b"))
        self.assertIsNone(registry.dispatch("c"))
        self.assertEqual(registry.bound_keys(), ("a", "b"))


class NormalModeKeyTests(unittest.TestCase):
    def test_enter_walks_down_and_parent_link_walks_up(self) -> None:
        backend = _Buckets()
        state, dispatcher, orchestrator = _session(backend)

        _press(dispatcher, orchestrator, "r")
        self.assertIsNone(state.path)
        _press(dispatcher, orchestrator, "ENTER")
        self.assertEqual(state.path, "alpha/")
        _press(dispatcher, orchestrator, "j", "ENTER")
        self.assertEqual(state.path, "alpha/logs/")

        self.assertEqual(state.rows[state.selection_index].role, RowRole.PARENT_LINK)
        _press(dispatcher, orchestrator, "ENTER")
        self.assertEqual(state.path, "alpha/")
        _press(dispatcher, orchestrator, "ENTER")
        self.assertIsNone(state.path)
        self.assertEqual(backend.listed, [None, "alpha/", "alpha/logs/", "alpha/", None])

    def test_enter_on_object_opens_details_with_full_key(self) -> None:
        backend = _Buckets()
        state, dispatcher, orchestrator = _session(backend)
        orchestrator.refresh("alpha/logs/")
        orchestrator.poll()

        _press(dispatcher, orchestrator, "j", "ENTER")

        self.assertEqual(state.mode, ModalMode.DETAIL_VIEW)
        self.assertEqual(backend.described, [("logs/app.log", "alpha/logs/")])
        self.assertEqual(state.detail.content, [("Name", "logs/app.log")])

    def test_enter_walks_ecs_cluster_service_task(self) -> None:
        client = boto3.client(
            "ecs",
            region_name="us-east-1",
            aws_access_key_id="testing",
            aws_secret_access_key="testing",
        )
        task_arn = "arn:aws:ecs:us-east-1:123456789012:task/prod/0123abcd"
        with Stubber(client) as stubber:
            stubber.add_response(
                "list_clusters", {"clusterArns": ["arn:aws:ecs:us-east-1:123456789012:cluster/prod"]}
            )
            stubber.add_response(
                "list_services",
                {"serviceArns": ["arn:aws:ecs:us-east-1:123456789012:service/prod/web"]},
                {"cluster": "prod"},
            )
            stubber.add_response("list_tasks", {"taskArns": [task_arn]}, {"cluster": "prod", "serviceName": "web"})
            stubber.add_response(
                "describe_tasks", {"tasks": [{"taskArn": task_arn}]}, {"cluster": "prod", "tasks": [task_arn]}
            )
            stubber.add_response(
                "describe_tasks",
                {"tasks": [{"taskArn": task_arn, "lastStatus": "RUNNING"}]},
                {"cluster": "prod", "tasks": ["0123abcd"]},
            )
            state, dispatcher, orchestrator = _session(EcsService(client))
            state.active_service = [d.kind for d in state.services].index(ServiceKind.ECS)

            _press(dispatcher, orchestrator, "r", "ENTER")
            self.assertEqual(state.path, "prod/")
            _press(dispatcher, orchestrator, "j", "ENTER")
            self.assertEqual(state.path, "prod/web/")
            _press(dispatcher, orchestrator, "j", "ENTER")
            stubber.assert_no_pending_responses()

        self.assertEqual(state.mode, ModalMode.DETAIL_VIEW)
        self.assertEqual(dict(state.detail.content)["Last Status"], "RUNNING")

    def test_i_on_bucket_opens_bucket_details(self) -> None:
        backend = _Buckets()
        state, dispatcher, orchestrator = _session(backend)

        _press(dispatcher, orchestrator, "r", "i")

        self.assertEqual(backend.described, [("alpha", None)])
        self.assertEqual(state.detail.title, "alpha")

    def test_i_on_prefix_shows_hint(self) -> None:
        backend = _Buckets()
        state, dispatcher, orchestrator = _session(backend)
        orchestrator.refresh("alpha/")
        orchestrator.poll()

        _press(dispatcher, orchestrator, "j", "i")

        self.assertEqual(state.mode, ModalMode.NORMAL)
        self.assertEqual(state.status_message, "Select an object or bucket to view details")

    def test_enter_on_message_row_shows_hint(self) -> None:
        state, dispatcher, orchestrator = _session()
        state.rows = message_rows("Press 'r' to refresh and load resources")

        _press(dispatcher, orchestrator, "ENTER")

        self.assertEqual(state.status_message, "Select a valid row")

    def test_refresh_without_client_reports_not_initialized(self) -> None:
        state, dispatcher, orchestrator = _session(connected=False)

        _press(dispatcher, orchestrator, "r")

        self.assertEqual(state.status_message, "AWS client not initialized")
        self.assertNotEqual(state.loading_phase, LoadingPhase.LOADING)

    def test_arrow_keys_and_vim_keys_move_selection(self) -> None:
        state, dispatcher, orchestrator = _session()
        state.rows = [
            Row(RowRole.HEADER, "Name"),
            Row(RowRole.ENTRY, "a", entry_id="a"),
            Row(RowRole.ENTRY, "b", entry_id="b"),
        ]
        state.selection_index = 1

        _press(dispatcher, orchestrator, "DOWN")
        self.assertEqual(state.selection_index, 2)
        _press(dispatcher, orchestrator, "k")
        self.assertEqual(state.selection_index, 1)
        _press(dispatcher, orchestrator, "UP")
        self.assertEqual(state.selection_index, 2)


class ModalKeyTests(unittest.TestCase):
    def test_quit_requires_confirmation(self) -> None:
        state, dispatcher, orchestrator = _session()

        self.assertEqual(_press(dispatcher, orchestrator, "q"), [False])
        self.assertEqual(state.mode, ModalMode.QUIT_CONFIRM)
        self.assertEqual(_press(dispatcher, orchestrator, "n"), [False])
        self.assertEqual(state.mode, ModalMode.NORMAL)
        self.assertEqual(_press(dispatcher, orchestrator, "q", "Y"), [False, True])

    def test_uppercase_variants_match_lowercase(self) -> None:
        backend = _Buckets()
        state, dispatcher, orchestrator = _session(backend)

        _press(dispatcher, orchestrator, "R")
        self.assertEqual(backend.listed, [None])
        _press(dispatcher, orchestrator, "I")
        self.assertEqual(state.mode, ModalMode.DETAIL_VIEW)
        _press(dispatcher, orchestrator, "Q")
        self.assertEqual(state.mode, ModalMode.QUIT_CONFIRM)
        _press(dispatcher, orchestrator, "N", "I", "SPACE", "Q")
        self.assertEqual(state.mode, ModalMode.QUIT_CONFIRM)
        _press(dispatcher, orchestrator, "ESC")
        self.assertEqual(state.mode, ModalMode.SERVICE_PICKER)
        _press(dispatcher, orchestrator, "ESC", "Q")
        self.assertEqual(state.mode, ModalMode.QUIT_CONFIRM)

    def test_ctrl_c_asks_for_confirmation(self) -> None:
        state, dispatcher, orchestrator = _session()

        self.assertFalse(dispatcher.handle("CTRL_C"))
        self.assertEqual(state.mode, ModalMode.QUIT_CONFIRM)

    def test_quit_confirm_swallows_other_keys(self) -> None:
        state, dispatcher, orchestrator = _session()
        _press(dispatcher, orchestrator, "q")

        self.assertEqual(_press(dispatcher, orchestrator, "r", "j", "SPACE"), [False, False, False])

        self.assertEqual(state.mode, ModalMode.QUIT_CONFIRM)
        self.assertEqual(state.loading_phase, LoadingPhase.IDLE)

    def test_picker_keys(self) -> None:
        state, dispatcher, orchestrator = _session()

        _press(dispatcher, orchestrator, "SPACE")
        self.assertEqual(state.mode, ModalMode.SERVICE_PICKER)
        self.assertEqual(state.picker_cursor, 1)
        _press(dispatcher, orchestrator, "j", "f")
        self.assertTrue(state.services[2].favorite)
        _press(dispatcher, orchestrator, "DOWN", "k", "ENTER")

        self.assertEqual(state.mode, ModalMode.NORMAL)
        self.assertEqual(state.active_descriptor.kind, ServiceKind.IAM)

    def test_picker_closes_with_space_or_escape(self) -> None:
        state, dispatcher, orchestrator = _session()

        _press(dispatcher, orchestrator, "SPACE", "j", "SPACE")
        self.assertEqual(state.mode, ModalMode.NORMAL)
        self.assertEqual(state.active_service, 1)
        _press(dispatcher, orchestrator, "SPACE", "ESC")
        self.assertEqual(state.mode, ModalMode.NORMAL)

    def test_q_from_picker_suspends_it_under_quit_confirm(self) -> None:
        state, dispatcher, orchestrator = _session()

        _press(dispatcher, orchestrator, "SPACE", "q", "ESC")

        self.assertEqual(state.mode, ModalMode.SERVICE_PICKER)

    def test_detail_keys_scroll_and_close(self) -> None:
        state, dispatcher, orchestrator = _session()
        _press(dispatcher, orchestrator, "r", "i")
        state.detail.content = [("a", "1"), ("b", "2")]

        _press(dispatcher, orchestrator, "j")
        self.assertEqual(state.detail.scroll_offset, 1)
        _press(dispatcher, orchestrator, "UP")
        self.assertEqual(state.detail.scroll_offset, 0)
        _press(dispatcher, orchestrator, "r")
        self.assertEqual(state.loading_phase, LoadingPhase.LOADED)
        _press(dispatcher, orchestrator, "I")

        self.assertEqual(state.mode, ModalMode.NORMAL)
        self.assertEqual(state.detail.content, [])


if __name__ == "__main__":
    unittest.main()
