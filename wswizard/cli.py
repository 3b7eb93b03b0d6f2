"""Command-line front door for wswizard.

Parses CLI options, builds the browser engine, and dispatches either to a
one-shot command (listing, open, create, show) or to an interactive surface.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from . import highlight
from .errors import NotConfigured, WorkspaceWizardError
from .runtime import config, run_browser
from .runtime.config import SURFACE_PICKER, SURFACE_TREE, START_NONE
from .runtime.engine import BrowserEngine, ListingResult
from .workspace_model import WORKSPACE, Node, is_workspace_file_name, strip_marker

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
STDERR_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
INTERACTIVE_COMMANDS = {"tree", "pick"}


def _configure_logging(verbose: bool, interactive: bool) -> None:
    """Log to stderr for one-shot commands and to a file for interactive ones."""
    level = logging.DEBUG if verbose else (logging.INFO if interactive else logging.WARNING)
    if logging.getLogger().handlers:
        return
    if not interactive:
        logging.basicConfig(level=level, stream=sys.stderr, format=STDERR_LOG_FORMAT)
        return
    try:
        config.LOG_PATH.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(config.LOG_PATH, encoding="utf-8")
    except OSError:
        # Never write log lines over the interactive screen.
        handler = logging.NullHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.basicConfig(level=level, handlers=[handler])


def _is_tty(stream) -> bool:
    try:
        return os.isatty(stream.fileno())
    except (OSError, ValueError):
        return False


def format_listing(result: ListingResult) -> str:
    """One entry per line; folders carry a trailing ``/``."""
    return "".join(f"{node.name}/\n" if node.is_folder else f"{node.name}\n" for node in result.nodes)


def _print_listing(result: ListingResult | None) -> None:
    if result is None:
        raise NotConfigured()
    if result.error is not None:
        raise result.error
    sys.stdout.write(format_listing(result))


def _require_position(engine: BrowserEngine, parent: str | None) -> Path:
    if parent is not None:
        return Path(parent)
    position = engine.position
    if position is None:
        raise NotConfigured()
    return position


def _workspace_node(path: Path) -> Node:
    if not is_workspace_file_name(path.name):
        raise SystemExit(f"Not a workspace file: {path}")
    if not path.is_file():
        raise SystemExit(f"Path not found: {path}")
    return Node(path=path.absolute(), name=strip_marker(path.name), kind=WORKSPACE)


def _command_select_root(engine: BrowserEngine, args: argparse.Namespace) -> None:
    path = Path(args.path).expanduser()
    if not path.is_dir():
        raise SystemExit(f"Not a directory: {path}")
    root = engine.configure_root(path)
    sys.stdout.write(f"{root}\n")


def _command_refresh(engine: BrowserEngine, args: argparse.Namespace) -> None:
    _print_listing(engine.refresh())


def _command_list(engine: BrowserEngine, args: argparse.Namespace) -> None:
    target = Path(args.path).expanduser() if args.path is not None else None
    _print_listing(engine.list_children(target))


def _command_open(engine: BrowserEngine, args: argparse.Namespace) -> None:
    node = _workspace_node(Path(args.path).expanduser())
    new_window = args.new_window
    if new_window is None:
        new_window = engine.settings.open_in_new_window(SURFACE_PICKER)
    message = engine.open(node, new_window)
    if message:
        raise SystemExit(message)


def _command_new_folder(engine: BrowserEngine, args: argparse.Namespace) -> None:
    created = engine.create_folder(_require_position(engine, args.parent), args.name)
    sys.stdout.write(f"{created}\n")


def _command_new_workspace(engine: BrowserEngine, args: argparse.Namespace) -> None:
    created, launch_error = engine.create_workspace(
        _require_position(engine, args.parent),
        args.name,
        [Path(folder).expanduser().absolute() for folder in args.folder],
    )
    sys.stdout.write(f"{created}\n")
    if launch_error:
        raise SystemExit(launch_error)


def _command_show(engine: BrowserEngine, args: argparse.Namespace) -> None:
    path = Path(args.path).expanduser()
    if not path.is_file():
        raise SystemExit(f"Path not found: {path}")
    no_color = args.no_color or not _is_tty(sys.stdout)
    rendered = highlight.colorize_workspace(highlight.read_text(path), engine.settings.style, no_color)
    sys.stdout.write(rendered if rendered.endswith("\n") else rendered + "\n")


def _run_surface(engine: BrowserEngine, surface: str, args: argparse.Namespace) -> None:
    if not (_is_tty(sys.stdin) and _is_tty(sys.stdout)):
        _print_listing(engine.list_children())
        return
    run_browser(
        surface,
        engine,
        no_color=args.no_color,
        open_folders=[Path(folder).expanduser().absolute() for folder in args.folder],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wswizard",
        description="Browse a folder of .code-workspace files and open them in your editor.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")

    folders = argparse.ArgumentParser(add_help=False)
    folders.add_argument(
        "--folder",
        action="append",
        default=[],
        metavar="DIR",
        help="Folder open in the current editor session (repeatable).",
    )

    sub = parser.add_subparsers(dest="command", metavar="COMMAND")
    select_root = sub.add_parser("select-root", help="Choose the workspaces folder.")
    select_root.add_argument("path")
    sub.add_parser("refresh", help="Re-read settings and print the root listing.")
    list_cmd = sub.add_parser("list", help="List a folder under the workspaces folder.")
    list_cmd.add_argument("path", nargs="?", default=None)
    sub.add_parser("tree", parents=[folders], help="Browse with the expandable tree.")
    sub.add_parser("pick", parents=[folders], help="Browse with the drill-down picker.")

    open_cmd = sub.add_parser("open", help="Open a workspace file.")
    open_cmd.add_argument("path")
    target = open_cmd.add_mutually_exclusive_group()
    target.add_argument("--new-window", dest="new_window", action="store_const", const=True, default=None)
    target.add_argument("--current-window", dest="new_window", action="store_const", const=False)

    new_folder = sub.add_parser("new-folder", help="Create a folder.")
    new_folder.add_argument("name")
    new_folder.add_argument("--parent", default=None, help="Parent folder (default: workspaces folder).")

    new_workspace = sub.add_parser("new-workspace", parents=[folders], help="Create and open a workspace file.")
    new_workspace.add_argument("name")
    new_workspace.add_argument("--parent", default=None, help="Parent folder (default: workspaces folder).")

    show = sub.add_parser("show", help="Print a workspace file with syntax highlighting.")
    show.add_argument("path")
    return parser


COMMANDS = {
    "select-root": _command_select_root,
    "refresh": _command_refresh,
    "list": _command_list,
    "open": _command_open,
    "new-folder": _command_new_folder,
    "new-workspace": _command_new_workspace,
    "show": _command_show,
}


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run one command or an interactive surface.

    Without a command the configured start surface runs; a start surface of
    ``none`` prints the root listing instead.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "folder"):
        args.folder = []

    settings = config.load_settings()
    surface = None
    if args.command is None and settings.start_surface != START_NONE:
        surface = settings.start_surface
    elif args.command in INTERACTIVE_COMMANDS:
        surface = SURFACE_TREE if args.command == "tree" else SURFACE_PICKER
    _configure_logging(args.verbose, interactive=surface is not None)

    engine = BrowserEngine(settings)
    try:
        if surface is not None:
            _run_surface(engine, surface, args)
        elif args.command is None:
            _print_listing(engine.list_children())
        else:
            COMMANDS[args.command](engine, args)
    except WorkspaceWizardError as exc:
        logger.debug("Command failed", exc_info=True)
        raise SystemExit(str(exc)) from exc
    finally:
        engine.close()


if __name__ == "__main__":
    main()
