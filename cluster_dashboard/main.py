"""Main module entrypoint for local runtime execution.

This module validates startup configuration and launches the dashboard
listener, or prints one cluster snapshot as JSON.
"""

import argparse
import logging
import signal
import threading

from cluster_dashboard.bootstrap import bootstrap_create_runtime
from cluster_dashboard.config import config_load_settings
from cluster_dashboard.dashboard import render_snapshot_json
from cluster_dashboard.observability import observability_configure_logging
from cluster_dashboard.server import ListenerBindError, ListenerStartError

logger = logging.getLogger("cluster_dashboard.main")


def main(argv: list[str] | None = None) -> None:
    """Run selected runtime command with validated startup configuration.

    Args:
        argv: Optional argument list, defaults to `sys.argv[1:]`.

    Returns:
        None: This function does not return a runtime value.

    Raises:
        SettingsLoadError: Raised when configuration validation fails.
        SystemExit: Raised with status 1 when the listener cannot start.
    """

    argument_parser = argparse.ArgumentParser(description="Cluster health dashboard runtime entrypoint")
    argument_parser.add_argument(
        "command",
        nargs="?",
        default="api",
        choices=("api", "snapshot"),
        help="Runtime command: `api` serves the dashboard until interrupted, "
        "`snapshot` prints one cluster snapshot as JSON",
        type=str,
    )
    parsed_arguments = argument_parser.parse_args(argv)

    settings = config_load_settings()
    observability_configure_logging(level=settings.log_level, json_format=settings.log_json)
    runtime = bootstrap_create_runtime(settings)

    if parsed_arguments.command == "snapshot":
        print(render_snapshot_json(runtime.snapshot_service.snapshot_build()))
        return

    main_install_signal_handlers(runtime.cancellation_event)
    try:
        publish_address = runtime.communication_listener.listener_open()
    except (ListenerBindError, ListenerStartError) as error:
        logger.error("Dashboard listener failed to start: %s", error)
        raise SystemExit(1) from error

    logger.info("Dashboard available at %s", publish_address)
    try:
        while not runtime.cancellation_event.wait(timeout=1.0):
            pass
    finally:
        runtime.communication_listener.listener_close()


def main_install_signal_handlers(cancellation_event: threading.Event) -> None:
    """Set the cancellation event on SIGINT and SIGTERM.

    Args:
        cancellation_event: Process-wide shutdown signal.
    """

    def _main_request_shutdown(signal_number, _frame) -> None:
        logger.info("Received signal %s, shutting down", signal.Signals(signal_number).name)
        cancellation_event.set()

    signal.signal(signal.SIGINT, _main_request_shutdown)
    signal.signal(signal.SIGTERM, _main_request_shutdown)


if __name__ == "__main__":
    main()
