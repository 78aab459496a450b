"""Command line front end: one reconciliation pass per invocation."""

import logging
import signal
import sys
from argparse import ArgumentParser
from pathlib import Path

from pydantic import ValidationError

from cgroup_manager.environment import check_environment
from cgroup_manager.exceptions import CgroupManagerError, NoProcessesFound
from cgroup_manager.logfiles import cleanup_logs, log_file_path, prepare_log_file
from cgroup_manager.reconcile import Mode, Reconciler, report
from cgroup_manager.settings import Settings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

USAGE = """
Usage: cgroup-manager --activate
      -a|--activate   : Apply cgroups to all runtime processes
      -d|--deactivate : Remove cgroups from all runtime processes
      -h|--help       : Display this help
      <nothing>       : Display existing cgroup configuration for runtime processes
"""


class MainParser(ArgumentParser):
    """Argument parser whose usage errors and help both exit with code 1."""

    def __init__(self, **kwargs):
        super().__init__(prog="cgroup-manager", add_help=False, **kwargs)

        self.description = "cgroup-manager - place runtime processes into CPU cgroups"
        self.add_argument("-h", "--help", action="store_true")
        group = self.add_mutually_exclusive_group()
        group.add_argument("-a", "--activate", action="store_true")
        group.add_argument("-d", "--deactivate", action="store_true")

    def format_usage(self) -> str:
        return USAGE

    def format_help(self) -> str:
        return USAGE

    def error(self, message: str):
        print(f"{self.prog}: {message}", file=sys.stderr)
        self.exit(1, USAGE)


def parse_mode(parser: MainParser, argv: list[str] | None = None) -> Mode:
    args = parser.parse_args(argv)
    if args.help:
        parser.exit(1, USAGE)
    if args.activate:
        return Mode.ACTIVATE
    if args.deactivate:
        return Mode.DEACTIVATE
    return Mode.INSPECT


def configure_logging(log_file: Path, level: str) -> tuple[list[logging.Handler], int]:
    """
    Log to the run's log file, and warnings and errors also to stderr.

    Returns:
        The installed handlers and the root logger level they replace.
    """
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)

    file_handler = logging.FileHandler(log_file)
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(formatter)

    root = logging.getLogger()
    previous_level = root.level
    root.setLevel(level)
    root.addHandler(file_handler)
    root.addHandler(console_handler)
    return [file_handler, console_handler], previous_level


def remove_logging(handlers: list[logging.Handler], level: int) -> None:
    root = logging.getLogger()
    root.setLevel(level)
    for handler in handlers:
        root.removeHandler(handler)
        handler.close()


def _raise_exit(signum, frame):
    raise SystemExit(128 + signum)


def install_signal_handlers() -> dict:
    """Turn termination signals into SystemExit so cleanup still runs."""
    previous = {}
    for signum in (signal.SIGTERM, signal.SIGHUP, signal.SIGQUIT):
        previous[signum] = signal.signal(signum, _raise_exit)
    return previous


def restore_signal_handlers(previous: dict) -> None:
    for signum, handler in previous.items():
        signal.signal(signum, handler)


def main(argv: list[str] | None = None) -> int:
    """Run a pass and return the process exit code."""
    mode = parse_mode(MainParser(), argv)

    try:
        settings = Settings.load()
        check_environment()
        log_file = log_file_path(settings.log_dir)
        prepare_log_file(log_file)
    except (ValidationError, FileNotFoundError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1
    except CgroupManagerError as e:
        print(f" !!!! {e}", file=sys.stderr)
        return e.exit_code

    handlers, previous_level = configure_logging(log_file, settings.log_level)
    previous_signal_handlers = install_signal_handlers()
    try:
        result = Reconciler(settings).run(mode)
        report(result)
        return 0
    except NoProcessesFound as e:
        logger.info(str(e))
        print(f" !!!! {e}", file=sys.stderr)
        return e.exit_code
    except CgroupManagerError as e:
        logger.error(f"Error: {e}")
        return e.exit_code
    except Exception as e:
        logger.exception(f"Error: {e}")
        return 1
    finally:
        restore_signal_handlers(previous_signal_handlers)
        remove_logging(handlers, previous_level)
        cleanup_logs(log_file, settings.log_retention_days)


def run() -> None:
    sys.exit(main())
