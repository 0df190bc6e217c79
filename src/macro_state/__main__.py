"""Entry point for `python -m macro_state` and the `macro-state` CLI script."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from macro_state.adapter import StateAdapter, StateResult
from macro_state.canonical import to_canonical_json
from macro_state.epoch import current_epoch, reset_epoch
from macro_state.errors import MacroStateError
from macro_state.state_store import default_store


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="macro-state",
        description="Read and write build-scoped macro state from a build step",
    )
    parser.add_argument("--state-dir", type=Path, default=None, help="Storage root (overrides MACRO_STATE_DIR)")
    parser.add_argument("--epoch", default=None, help="Build epoch identifier (overrides MACRO_STATE_EPOCH)")
    parser.add_argument("--json", action="store_true", help="Print results as canonical JSON")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("read", "Print the value stored for KEY"),
        ("has", "Print whether KEY holds a value"),
        ("clear", "Remove the value stored for KEY"),
        ("read-list", "Print the items appended under KEY, one per line"),
        ("path", "Print the file used for KEY"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("key")

    write = sub.add_parser("write", help="Store VALUE under KEY")
    write.add_argument("key")
    write.add_argument("value")

    init = sub.add_parser("init", help="Print the value of KEY, storing DEFAULT first if absent")
    init.add_argument("key")
    init.add_argument("default")

    append = sub.add_parser("append", help="Append ITEM to the list under KEY")
    append.add_argument("key")
    append.add_argument("item")

    sub.add_parser("keys", help="Print the keys holding a value in this epoch")
    sub.add_parser("epoch", help="Print the build epoch (export it as MACRO_STATE_EPOCH)")
    return parser.parse_args(argv)


def run_command(args: argparse.Namespace) -> StateResult | None:
    adapter = StateAdapter(default_store())
    if args.command == "write":
        return adapter.write(args.key, args.value)
    if args.command == "read":
        return adapter.read(args.key)
    if args.command == "has":
        return adapter.has(args.key)
    if args.command == "clear":
        return adapter.clear(args.key)
    if args.command == "init":
        return adapter.init(args.key, args.default)
    if args.command == "append":
        return adapter.append(args.key, args.item)
    if args.command == "read-list":
        return adapter.read_list(args.key)
    return None


def _emit(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Overrides must be in the environment before settings or the epoch are read.
    if args.state_dir is not None:
        os.environ["MACRO_STATE_DIR"] = str(args.state_dir)
    if args.epoch is not None:
        os.environ["MACRO_STATE_EPOCH"] = args.epoch
        reset_epoch()

    try:
        if args.command == "epoch":
            epoch = current_epoch()
            _emit(to_canonical_json({"epoch": epoch}) + "\n" if args.json else f"{epoch}\n")
            return 0
        if args.command == "keys":
            keys = default_store().keys()
            _emit(to_canonical_json({"keys": keys}) + "\n" if args.json else "".join(f"{key}\n" for key in keys))
            return 0
        if args.command == "path":
            path = default_store().location(args.key).path
            _emit(to_canonical_json({"key": args.key, "path": path}) + "\n" if args.json else f"{path}\n")
            return 0
        result = run_command(args)
    except MacroStateError as exc:
        logging.error("%s", exc)
        return 1
    except ValueError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    if result is None:
        logging.error("Unknown command: %s", args.command)
        return 1

    if args.json:
        _emit(result.to_json() + "\n")
    elif not result.ok:
        logging.error("%s", result.diagnostic)
    elif isinstance(result.value, bool):
        _emit("true\n" if result.value else "false\n")
    elif isinstance(result.value, list):
        _emit("".join(f"{item}\n" for item in result.value))
    elif isinstance(result.value, str):
        _emit(result.value)
    return 0 if result.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
