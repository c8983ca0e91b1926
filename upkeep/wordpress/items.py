"""WP-CLI backed hooks shared by the plugin and theme commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Sequence, Tuple, Union

from upkeep.utils import error, line, log, success
from .cli import wp_cmd, wp_cmd_json
from .command import CommandError, CommandWithUpgrade, ItemNotFound, UPDATE_MARKER
from .updates import UpdateSource, WpCliUpdateSource
from .upgrader import PackageInstaller, WpCliInstaller, item_slug

DETAIL_FIELDS = {
    "title": "Name",
    "version": "Version",
    "author": "Author",
    "description": "Description",
}


class WpCliItemCommand(CommandWithUpgrade):
    """Plugin/theme command talking to one site through WP-CLI."""

    list_fields = "name,status,version"

    def __init__(
        self,
        target: Union[str, Path],
        updates: UpdateSource | None = None,
        installer: PackageInstaller | None = None,
    ):
        if updates is None:
            updates = WpCliUpdateSource(target, self.item_type)
        if installer is None:
            installer = WpCliInstaller(target, self.item_type)
        super().__init__(updates, installer)
        self.target = target

    def item_file(self, row: dict) -> str:
        return str(row.get("name", "")).strip()

    def _rows(self) -> list[dict]:
        ok, rows = wp_cmd_json(self.target, [self.item_type, "list", f"--fields={self.list_fields}"])
        if not ok or not isinstance(rows, list):
            logging.error("Could not read %s list", self.item_type)
            return []
        return [row for row in rows if isinstance(row, dict) and self.item_file(row)]

    def _row(self, file: str) -> dict:
        for row in self._rows():
            if self.item_file(row) == file:
                return row
        raise ItemNotFound(f"The {self.item_type} '{item_slug(file)}' could not be found.")

    # ── Hooks ───────────────────────────────────────────────────────────────
    def parse_name(self, args: Sequence[str], subcommand: str) -> Tuple[str, str]:
        if len(args) != 1:
            raise CommandError(f"usage: wp {self.item_type} {subcommand} <{self.item_type}-name>")
        name = args[0]
        for row in self._rows():
            file = self.item_file(row)
            if name in (file, str(row.get("name", "")), item_slug(file)):
                return file, item_slug(file)
        raise ItemNotFound(f"The {self.item_type} '{name}' could not be found.")

    def get_item_list(self) -> list[str]:
        return [self.item_file(row) for row in self._rows()]

    def get_details(self, file: str) -> dict[str, str]:
        ok, data = wp_cmd_json(
            self.target,
            [self.item_type, "get", item_slug(file), f"--fields=name,{','.join(DETAIL_FIELDS)}"],
        )
        if not ok or not isinstance(data, dict):
            # `get` only knows regular items; must-use plugins and drop-ins
            # are only visible through `list`.
            log(f"No {self.item_type} get for {file}; using list row")
            row = self._row(file)
            return {
                "Name": str(row.get("title") or row.get("name") or item_slug(file)),
                "Version": str(row.get("version", "") or ""),
                "Author": "",
                "Description": "",
            }
        details = {}
        for key, header in DETAIL_FIELDS.items():
            details[header] = str(data.get(key, "") or "")
        if not details["Name"]:
            details["Name"] = str(data.get("name", ""))
        return details

    def status_all(self) -> None:
        rows = self._rows()
        pending = self.updates.query()

        line(f"{len(rows)} installed {self.item_type}s:")
        for row in rows:
            file = self.item_file(row)
            marker = UPDATE_MARKER + "%n" if file in pending else " "
            status = self.format_status(self.get_status(file, row), "short")
            line(f"  {marker}{status} {item_slug(file)}%n")

        line()
        self.show_legend()

    def _status_single(self, details: dict[str, str], name: str, version: str, status: str) -> None:
        line(f"{self.item_type.capitalize()} {name} details:")
        line(f"    Name: {details.get('Name', '')}")
        line(f"    Status: {status}%n")
        line(f"    Version: {version}")
        line(f"    Author: {details.get('Author', '')}")
        line(f"    Description: {details.get('Description', '')}")

    def install_from_repo(self, slug: str, options: Mapping[str, Any]) -> int:
        command = [self.item_type, "install", slug]
        if options.get("version"):
            command.append(f"--version={options['version']}")
        if options.get("force"):
            command.append("--force")
        if options.get("activate"):
            command.append("--activate")

        if not wp_cmd(self.target, command):
            error(f"Could not install {self.item_type} '{slug}'.")
            return 1
        success(f"Installed {self.item_type} '{slug}'.")
        return 0

    def _toggle(self, action: str, names: Sequence[str], extra: Sequence[str] = ()) -> int:
        failed = 0
        for name in names:
            if wp_cmd(self.target, [self.item_type, action, name, *extra]):
                log(f"PASS: {action} {self.item_type} {name}")
                continue
            error(f"Could not {action} {self.item_type} '{name}'.")
            failed += 1
        if failed:
            return 1
        success(f"{action.capitalize()}d {len(names)} {self.item_type}(s).")
        return 0
