"""Command-line interface for localdrive."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Callable

from .drive import Drive
from .exceptions import DriveError
from .listing import ListOptions, glob_matcher
from .logging_setup import configure_logging
from .settings import DriveSettings, build_drive


def _add_common_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--root",
        default=None,
        help="Drive root folder (defaults to $LOCALDRIVE_ROOT, then the current folder).",
    )
    parser.add_argument(
        "--no-overwrite",
        action="store_true",
        help="Rename write/copy/move targets instead of replacing existing entries.",
    )
    parser.add_argument("--read-only", action="store_true", help="Reject every modification.")
    parser.add_argument("--verbose", action="store_true", help="Log every drive operation.")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON lines.")


def _load_settings(args: argparse.Namespace) -> DriveSettings:
    overrides: dict[str, object] = {}
    if args.root is not None:
        overrides["root"] = args.root
    if args.no_overwrite:
        overrides["prevent_name_collision"] = True
    if args.read_only:
        overrides["read_only"] = True
    if args.verbose:
        overrides["verbose"] = True
    if args.json_logs:
        overrides["log_json"] = True
    return DriveSettings(**overrides)


def _print_json(payload: object) -> None:
    sys.stdout.write(json.dumps(payload, indent=2) + "\n")


def _run_ls(drive: Drive, args: argparse.Namespace) -> int:
    options = ListOptions(
        skip_files=args.dirs_only,
        recursive=args.recursive or args.nested,
        nested=args.nested,
        include=glob_matcher(*args.include) if args.include else None,
        exclude=glob_matcher(*args.exclude) if args.exclude else None,
    )
    _print_json([entry.to_dict() for entry in drive.list(args.id, options)])
    return 0


def _run_info(drive: Drive, args: argparse.Namespace) -> int:
    _print_json(drive.info(args.id).to_dict())
    return 0


def _run_cat(drive: Drive, args: argparse.Namespace) -> int:
    data = drive.read(args.id)
    sys.stdout.flush()
    sys.stdout.buffer.write(data)
    sys.stdout.buffer.flush()
    return 0


def _run_write(drive: Drive, args: argparse.Namespace) -> int:
    data = args.text.encode("utf-8") if args.text is not None else sys.stdin.buffer.read()
    sys.stdout.write(drive.write(args.id, data) + "\n")
    return 0


def _run_mkdir(drive: Drive, args: argparse.Namespace) -> int:
    sys.stdout.write(drive.mkdir(args.id) + "\n")
    return 0


def _run_cp(drive: Drive, args: argparse.Namespace) -> int:
    sys.stdout.write(drive.copy(args.source, args.target) + "\n")
    return 0


def _run_mv(drive: Drive, args: argparse.Namespace) -> int:
    sys.stdout.write(drive.move(args.source, args.target) + "\n")
    return 0


def _run_rm(drive: Drive, args: argparse.Namespace) -> int:
    drive.remove(args.id)
    return 0


def _dispatch(args: argparse.Namespace) -> int:
    handler: Callable[[Drive, argparse.Namespace], int] = args.func
    try:
        settings = _load_settings(args)
        configure_logging(settings.log_level, settings.log_json)
        return handler(build_drive(settings), args)
    except DriveError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 1


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="localdrive")
    subparsers = parser.add_subparsers(dest="command_name", required=True)

    ls_parser = subparsers.add_parser("ls", help="List a folder")
    _add_common_flags(ls_parser)
    ls_parser.add_argument("id", nargs="?", default="/")
    ls_parser.add_argument("-r", "--recursive", action="store_true", help="Walk subfolders.")
    ls_parser.add_argument("--nested", action="store_true", help="Attach descendants as children.")
    ls_parser.add_argument("--dirs-only", action="store_true", help="Skip files.")
    ls_parser.add_argument("--include", action="append", default=[], metavar="GLOB")
    ls_parser.add_argument("--exclude", action="append", default=[], metavar="GLOB")
    ls_parser.set_defaults(func=_run_ls)

    for name, func, help_text in (
        ("info", _run_info, "Show one entry"),
        ("cat", _run_cat, "Print file contents"),
        ("mkdir", _run_mkdir, "Create a folder with its parents"),
        ("rm", _run_rm, "Remove a file or folder"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        _add_common_flags(sub)
        sub.add_argument("id")
        sub.set_defaults(func=func)

    write_parser = subparsers.add_parser("write", help="Write a file (stdin when TEXT is omitted)")
    _add_common_flags(write_parser)
    write_parser.add_argument("id")
    write_parser.add_argument("text", nargs="?", default=None)
    write_parser.set_defaults(func=_run_write)

    for name, func, help_text in (
        ("cp", _run_cp, "Copy a file or folder"),
        ("mv", _run_mv, "Move a file or folder"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        _add_common_flags(sub)
        sub.add_argument("source")
        sub.add_argument("target")
        sub.set_defaults(func=func)

    args = parser.parse_args(argv)
    raise SystemExit(_dispatch(args))


__all__ = ["main"]
