"""Runtime composition layer for awsome.

Loads config, sets up logging, builds the session state and its
controllers, starts the AWS connection, and runs the loop. This is the one
place where input, rendering, and the backends meet.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from concurrent.futures import Executor
from functools import partial

from ..input import KeyContext, KeyDispatcher
from ..render import list_view_rows, render_frame
from ..services import AwsClient, ServiceKind
from .config import load_aws_profile, load_aws_region, load_favorites, save_favorites
from .logging_config import setup_logging
from .loop import RuntimeLoopCallbacks, RuntimeLoopTiming, run_main_loop
from .modal import ModalArbiter
from .navigation import PathNavigator
from .refresh import RefreshOrchestrator
from .selection import SelectionController
from .state import ServiceDescriptor, SessionState, default_services
from .terminal import TerminalController

logger = logging.getLogger(__name__)


def build_services(favorites: set[ServiceKind] | None) -> list[ServiceDescriptor]:
    """Catalog in picker order, with persisted favorites replacing the defaults."""
    services = default_services()
    if favorites is not None:
        for service in services:
            service.favorite = service.kind in favorites
    return services


def persist_favorites(services: list[ServiceDescriptor]) -> None:
    save_favorites([service.kind for service in services if service.favorite])


def build_session(
    state: SessionState,
    executor: Executor | None = None,
    on_favorites_changed: Callable[[list[ServiceDescriptor]], None] = persist_favorites,
) -> tuple[KeyContext, RefreshOrchestrator]:
    """Wire the controllers around ``state``."""
    selection = SelectionController(state)
    arbiter = ModalArbiter(state, on_favorites_changed=on_favorites_changed)
    orchestrator = RefreshOrchestrator(state, selection, arbiter, executor=executor)
    context = KeyContext(
        state=state,
        selection=selection,
        navigator=PathNavigator(state),
        arbiter=arbiter,
        orchestrator=orchestrator,
    )
    return context, orchestrator


def run_browser(
    profile: str | None = None,
    region: str | None = None,
    log_level: str | None = None,
) -> None:
    """Initialize the session, connect to AWS in the background, and run the loop."""
    log_path = setup_logging(log_level)
    logger.info("starting awsome (log file: %s)", log_path)

    state = SessionState(services=build_services(load_favorites()))
    context, orchestrator = build_session(state)
    connect = partial(
        AwsClient.connect,
        profile=profile or load_aws_profile(),
        region=region or load_aws_region(),
    )
    orchestrator.connect(connect)

    stdin_fd = sys.stdin.fileno()
    terminal = TerminalController(stdin_fd, sys.stdout.fileno())
    dispatcher = KeyDispatcher(context)
    callbacks = RuntimeLoopCallbacks(
        handle_key=dispatcher.handle,
        poll_fetch=orchestrator.poll,
        render=render_frame,
        list_view_rows=list_view_rows,
    )
    try:
        run_main_loop(state, terminal, stdin_fd, RuntimeLoopTiming(), callbacks)
    finally:
        orchestrator.shutdown()
        logger.info("awsome exited")
