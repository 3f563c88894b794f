"""Asynchronous fetch-and-apply cycle for connect, list and describe calls.

Fetches run on a single background worker. The interaction loop calls
``poll`` once per iteration and results are applied on the loop thread, so
session state never has two writers. At most one fetch is in flight; a
request made while another is pending is rejected with a status message.
Results are always applied once resolved, even if the user has moved on.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_futures
from dataclasses import dataclass

from ..rows import build_rows, error_rows, loading_rows, message_rows, parent_link_row
from ..services import AwsClient, BackendError, ServiceBackend
from .modal import ModalArbiter
from .selection import SelectionController
from .state import INITIAL_ROW_TEXT, LoadingPhase, ServiceDescriptor, SessionState

logger = logging.getLogger(__name__)

NOT_CONNECTED_MESSAGE = "AWS client not initialized"
BUSY_MESSAGE = "Still loading, please wait..."


class StateGuardError(Exception):
    """Raised when a fetch is requested in a state that cannot start one."""


class FetchKind(enum.Enum):
    LIST = "list"
    DESCRIBE = "describe"
    CONNECT = "connect"


_KEEP_PATH = object()


@dataclass
class PendingFetch:
    """Bookkeeping for the single in-flight fetch."""

    kind: FetchKind
    service: ServiceDescriptor
    backend: ServiceBackend | None
    path: str | None
    future: Future
    entry_id: str | None = None


class RefreshOrchestrator:
    def __init__(
        self,
        state: SessionState,
        selection: SelectionController,
        arbiter: ModalArbiter,
        client: AwsClient | None = None,
        executor: Executor | None = None,
    ) -> None:
        self.state = state
        self.selection = selection
        self.arbiter = arbiter
        self.client = client
        self._executor = executor
        self._pending: PendingFetch | None = None

    @property
    def in_flight(self) -> bool:
        return self._pending is not None

    def _get_executor(self) -> Executor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="awsome-fetch")
        return self._executor

    def shutdown(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)

    # Connection

    def connect(self, factory: Callable[[], AwsClient]) -> bool:
        """Build the backend connection on the worker so the first frame shows progress."""
        state = self.state
        if self._pending is not None:
            state.status_message = BUSY_MESSAGE
            state.dirty = True
            return False
        state.loading_phase = LoadingPhase.LOADING
        state.rows = message_rows(INITIAL_ROW_TEXT)
        state.dirty = True
        logger.info("connecting to AWS")
        future = self._get_executor().submit(factory)
        self._pending = PendingFetch(FetchKind.CONNECT, state.active_descriptor, None, None, future)
        return True

    def _apply_connect(self, pending: PendingFetch) -> None:
        state = self.state
        client, error = self._result(pending)
        if error is not None:
            state.loading_phase = LoadingPhase.ERROR
            state.error_message = f"Failed to initialize AWS client: {error}"
            state.status_message = "Error: Failed to connect to AWS. Check credentials."
            state.rows = message_rows(
                "Failed to initialize AWS client",
                "Please check your AWS credentials and configuration",
                f"Error: {error}",
            )
            return
        self.client = client
        state.loading_phase = LoadingPhase.LOADED
        state.error_message = None
        state.status_message = "AWS client initialized. Press r to load resources."
        state.rows = message_rows("Press 'r' to refresh and load resources")

    # Fetch issue

    def _ensure_can_fetch(self) -> AwsClient:
        if self._pending is not None:
            raise StateGuardError(BUSY_MESSAGE)
        if self.client is None:
            raise StateGuardError(NOT_CONNECTED_MESSAGE)
        return self.client

    def refresh(self, path: object = _KEEP_PATH) -> bool:
        """List the active service at ``path`` (default: the current path).

        The path is committed to state only when the listing succeeds.
        """
        state = self.state
        target = state.path if path is _KEEP_PATH else path
        try:
            client = self._ensure_can_fetch()
        except StateGuardError as exc:
            state.status_message = str(exc)
            state.dirty = True
            return False

        service = state.active_descriptor
        backend = client.backend(service.kind)
        if not backend.hierarchical:
            target = None
        state.loading_phase = LoadingPhase.LOADING
        state.rows = loading_rows()
        state.selection_index = 0
        state.list_start = 0
        state.status_message = f"Loading {service.display_name} resources..."
        state.dirty = True
        logger.info("list %s path=%r", service.short_name, target)
        future = self._get_executor().submit(backend.list, target)
        self._pending = PendingFetch(FetchKind.LIST, service, backend, target, future)
        return True

    def describe(self, entry_id: str) -> bool:
        """Open the detail view and fetch attributes for ``entry_id``."""
        state = self.state
        try:
            client = self._ensure_can_fetch()
        except StateGuardError as exc:
            state.status_message = str(exc)
            state.dirty = True
            return False

        service = state.active_descriptor
        if not self.arbiter.open_detail(title=entry_id):
            return False
        backend = client.backend(service.kind)
        path = state.path
        state.status_message = f"Loading details for {entry_id}..."
        logger.info("describe %s entry=%r path=%r", service.short_name, entry_id, path)
        future = self._get_executor().submit(backend.describe, entry_id, path)
        self._pending = PendingFetch(FetchKind.DESCRIBE, service, backend, path, future, entry_id)
        return True

    # Resolution

    def poll(self) -> bool:
        """Apply the pending fetch if it has resolved; return whether state changed."""
        pending = self._pending
        if pending is None or not pending.future.done():
            return False
        self._pending = None
        if pending.kind == FetchKind.LIST:
            self._apply_list(pending)
        elif pending.kind == FetchKind.DESCRIBE:
            self._apply_describe(pending)
        else:
            self._apply_connect(pending)
        self.state.dirty = True
        return True

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the pending fetch resolves (or ``timeout``), then apply it."""
        pending = self._pending
        if pending is None:
            return False
        wait_futures([pending.future], timeout=timeout)
        return self.poll()

    @staticmethod
    def _result(pending: PendingFetch):
        try:
            return pending.future.result(), None
        except BackendError as exc:
            return None, exc.message
        except Exception as exc:
            logger.exception("%s %s fetch crashed", pending.service.short_name, pending.kind.value)
            return None, str(exc) or exc.__class__.__name__

    def _apply_list(self, pending: PendingFetch) -> None:
        state = self.state
        name = pending.service.display_name
        records, error = self._result(pending)
        if error is not None:
            logger.warning("list %s failed: %s", pending.service.short_name, error)
            state.loading_phase = LoadingPhase.ERROR
            state.error_message = error
            state.rows = error_rows(name, error)
            state.selection_index = 0
            state.list_start = 0
            state.status_message = "Error: Failed to load resources"
            return

        records = list(records or [])
        # A listing that resolves after a service switch keeps the new service at its root.
        state.path = pending.path if pending.service is state.active_descriptor else None
        state.loading_phase = LoadingPhase.LOADED
        state.error_message = None
        if records:
            state.rows = build_rows(records, pending.backend, pending.path)
            state.status_message = f"Loaded {len(records)} resources ({name})"
        else:
            rows = message_rows(pending.backend.empty_message(pending.path))
            if pending.backend.hierarchical and pending.path is not None:
                rows.append(parent_link_row())
            state.rows = rows
            state.status_message = f"No resources found for {name}"
        self.selection.reset(0)
        logger.info("list %s -> %d records", pending.service.short_name, len(records))

    def _apply_describe(self, pending: PendingFetch) -> None:
        state = self.state
        detail = state.detail
        pairs, error = self._result(pending)
        detail.loading = False
        detail.scroll_offset = 0
        if error is not None:
            logger.warning("describe %s %r failed: %s", pending.service.short_name, pending.entry_id, error)
            detail.content = [("Error", error)]
            state.status_message = "Error: Failed to load details"
            return
        detail.content = [(str(key), str(value)) for key, value in pairs or []]
        state.status_message = f"Details for {pending.entry_id}"


__all__ = [
    "BUSY_MESSAGE",
    "FetchKind",
    "NOT_CONNECTED_MESSAGE",
    "PendingFetch",
    "RefreshOrchestrator",
    "StateGuardError",
]
