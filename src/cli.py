"""Command-line interface for kbd-informer preferences."""

import argparse
import json
import sys
from pathlib import Path

from constants import APP_NAME, SAVED_SYMBOLS_KEY, VERSION
from controller import PresetManager, SettingsCache
from controller.validators import parse_bool
from model import SCHEMA
from store import ConfigStore, WriteError


def print_error_box(title: str, *lines: str) -> None:
    """Print a formatted error box to stderr.

    Args:
        title: The error title (will be prefixed with "Error: ")
        *lines: Additional lines to print in the box
    """
    print("=" * 60, file=sys.stderr)
    print(f"Error: {title}", file=sys.stderr)
    if lines:
        print("", file=sys.stderr)
    for line in lines:
        print(line, file=sys.stderr)
    print("=" * 60, file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=f"{APP_NAME}-prefs",
        description="Configure the symbols and icons shown for keyboard modifier keys.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Settings file (default: $KBD_INFORMER_CONFIG or ~/.config/kbd-informer/settings.json)",
    )
    sub = parser.add_subparsers(dest="command")
    sub.add_parser("edit", help="Open the preferences editor (default)")
    sub.add_parser("list", help="Print every setting")
    get_cmd = sub.add_parser("get", help="Print one setting")
    get_cmd.add_argument("key")
    set_cmd = sub.add_parser("set", help="Change one setting")
    set_cmd.add_argument("key")
    set_cmd.add_argument("value")
    sub.add_parser("reset", help="Reset symbols and icon paths to defaults")
    sub.add_parser("save-preset", help="Save current symbols and icon paths as the preset")
    return parser


def _format_value(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False)
    return value


def _coerce(key: str, text: str):
    """Convert command-line text to the key's declared type."""
    spec = SCHEMA.get(key)
    if spec is None:
        raise WriteError(f"Unknown setting: {key}")
    if spec.type_ is bool:
        value = parse_bool(text)
        if value is None:
            raise WriteError(f"Invalid value for {key}: expected true or false, got '{text}'")
        return value
    if spec.type_ is dict:
        try:
            return json.loads(text)
        except ValueError as e:
            raise WriteError(f"Invalid value for {key}: {e}") from e
    return text


def run_command(args: argparse.Namespace, store: ConfigStore) -> int:
    """Run a non-interactive command; returns the exit code."""
    if args.command == "list":
        for key in store.keys:
            print(f"{key} = {_format_value(store.get(key))}")
        return 0

    if args.command == "get":
        if args.key not in SCHEMA:
            print_error_box(f"Unknown setting: {args.key}")
            return 1
        print(_format_value(store.get(args.key)))
        return 0

    if args.command == "set":
        value = _coerce(args.key, args.value)
        if args.key == SAVED_SYMBOLS_KEY:
            store.set_preset(value)
        else:
            cache = SettingsCache(store)
            cache.load()
            if isinstance(value, bool):
                cache.set_boolean(args.key, value)
            else:
                cache.set_string(args.key, value)
        return 0

    cache = SettingsCache(store)
    cache.load()
    group = PresetManager.for_modifiers(cache)

    if args.command == "reset":
        changed = group.reset_to_default()
        print(f"Reset {len(changed)} setting(s) to defaults")
        return 0

    if args.command == "save-preset":
        group.save_as_preset()
        print("Saved current symbols as preset")
        return 0

    raise ValueError(f"Unhandled command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    store = ConfigStore(args.config)

    if args.command in (None, "edit"):
        from app import KeyboardInformerPrefs, setup_logging

        setup_logging()
        KeyboardInformerPrefs(store=store).run()
        return 0

    try:
        return run_command(args, store)
    except WriteError as e:
        print_error_box(str(e), "Run 'list' to see every setting and its current value.")
        return 1


if __name__ == "__main__":
    sys.exit(main())
