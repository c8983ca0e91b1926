"""Module entry point: `python -m upkeep.wordpress <site> plugin|theme ...`."""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from upkeep.utils import init_logging, log, set_color, status_fail
from .cli import site_path
from .command import CommandError
from .plugins import PluginCommand
from .themes import ThemeCommand

COMMANDS = {
    "plugin": PluginCommand,
    "theme": ThemeCommand,
}
DEFAULT_SUBCOMMAND = "status"
OPTION_NAMES = ("all", "activate", "force", "version", "network")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wp-upkeep",
        description="Check, install and update WordPress plugins and themes.",
    )
    parser.add_argument("site", help="domain under the site root, or path to a WordPress install")
    parser.add_argument("--no-color", action="store_true", help="plain output")
    kinds = parser.add_subparsers(dest="item_type", required=True)

    for item_type in COMMANDS:
        kind = kinds.add_parser(item_type, help=f"manage {item_type}s")
        subs = kind.add_subparsers(dest="subcommand")

        status = subs.add_parser("status", help=f"show {item_type} status")
        status.add_argument("names", nargs="*")

        install = subs.add_parser("install", help=f"install a {item_type} by slug or .zip path")
        install.add_argument("names", nargs="*")
        install.add_argument("--activate", action="store_true")
        install.add_argument("--force", action="store_true")
        install.add_argument("--version")

        update = subs.add_parser("update", help=f"update one or all {item_type}s")
        update.add_argument("names", nargs="*")
        update.add_argument("--all", action="store_true")

        activate = subs.add_parser("activate", help=f"activate a {item_type}")
        activate.add_argument("names", nargs="*")
        if item_type == "plugin":
            activate.add_argument("--network", action="store_true")
            deactivate = subs.add_parser("deactivate", help="deactivate plugins")
            deactivate.add_argument("names", nargs="*")
            deactivate.add_argument("--network", action="store_true")
    return parser


def run(ns: argparse.Namespace) -> int:
    command = COMMANDS[ns.item_type](site_path(ns.site))
    subcommand = ns.subcommand or DEFAULT_SUBCOMMAND
    names = list(getattr(ns, "names", []) or [])
    options = {}
    for key in OPTION_NAMES:
        value = getattr(ns, key, None)
        if value:
            options[key] = value
    log(f"{ns.item_type} {subcommand} names={names} options={options}")

    try:
        if subcommand == "status":
            return command.status(names)
        if subcommand == "install":
            return command.install(names, options)
        if subcommand == "update":
            return command.update(names, options)
        if subcommand == "activate":
            return command.activate(names, options)
        if subcommand == "deactivate":
            return command.deactivate(names, options)
    except CommandError as err:
        status_fail(str(err))
        return 1
    status_fail(f"unknown subcommand {subcommand}")
    return 1


def main(argv: Sequence[str] | None = None) -> int:
    init_logging(None)
    ns = build_parser().parse_args(sys.argv[1:] if argv is None else list(argv))
    if ns.no_color:
        set_color(False)
    return run(ns)


if __name__ == "__main__":
    raise SystemExit(main())
