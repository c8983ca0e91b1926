"""Shared status/install/update behavior for plugin and theme commands.

Subclasses supply the item-specific hooks; the update source and the
package installer are passed in so the flow can run against WP-CLI or
against in-memory stand-ins.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence, Tuple

from upkeep.utils import error, line, log, success, warning
from .updates import UpdateSource
from .upgrader import PackageInstaller, item_slug


class CommandError(Exception):
    """Bad input for a subcommand; reported by the entry point."""


class ItemNotFound(CommandError):
    """A plugin/theme name did not resolve to an installed item."""


STATUS_MAP = {
    "short": {
        "inactive": "I",
        "active": "A",
        "active-network": "N",
        "must-use": "M",
    },
    "long": {
        "inactive": "Inactive",
        "active": "Active",
        "active-network": "Network Active",
        "must-use": "Must Use",
    },
}

STATUS_COLORS = {
    "inactive": "",
    "active": "%g",
    "active-network": "%g",
    "must-use": "%c",
}

if not set(STATUS_MAP["short"]) == set(STATUS_MAP["long"]) == set(STATUS_COLORS):
    raise RuntimeError("status label and color maps are out of sync")

UPDATE_MARKER = "%yU"


class CommandWithUpgrade(ABC):
    item_type = ""

    def __init__(self, updates: UpdateSource, installer: PackageInstaller):
        self.updates = updates
        self.installer = installer

    # ── Hooks ───────────────────────────────────────────────────────────────
    @abstractmethod
    def parse_name(self, args: Sequence[str], subcommand: str) -> Tuple[str, str]:
        """Resolve CLI args to (identifier, display name) or raise CommandError."""

    @abstractmethod
    def get_item_list(self) -> list[str]:
        ...

    @abstractmethod
    def get_status(self, file: str) -> str:
        ...

    @abstractmethod
    def get_details(self, file: str) -> dict[str, str]:
        ...

    @abstractmethod
    def status_all(self) -> None:
        ...

    @abstractmethod
    def _status_single(self, details: dict[str, str], name: str, version: str, status: str) -> None:
        ...

    @abstractmethod
    def install_from_repo(self, slug: str, options: Mapping[str, Any]) -> int:
        ...

    @abstractmethod
    def activate(self, args: Sequence[str], options: Mapping[str, Any] | None = None) -> int:
        ...

    # ── Subcommands ─────────────────────────────────────────────────────────
    def status(self, args: Sequence[str] = ()) -> int:
        """Get the status of one or all items."""
        self.updates.refresh()

        if not args:
            self.status_all()
            return 0

        file, name = self.parse_name(args, "status")
        self.status_single(file, name)
        return 0

    def status_single(self, file: str, name: str) -> None:
        details = self.get_details(file)
        status = self.format_status(self.get_status(file), "long")

        version = details.get("Version", "")
        if self.has_update(file):
            version += " (%gUpdate available%n)"

        self._status_single(details, name, version, status)

    def install(self, args: Sequence[str], options: Mapping[str, Any]) -> int:
        """Install a new plugin/theme from the repository or a local zip."""
        if not args:
            line(f"usage: wp {self.item_type} install <slug>")
            return 1

        self.updates.refresh()

        slug = args[0].replace("\\", "")

        if not slug.endswith(".zip"):
            return self.install_from_repo(slug, options)

        ok, destination = self.installer.install_from_archive(slug)
        if not ok:
            error(f"Could not install {self.item_type} from {slug}")
            return 1
        log(f"PASS: Installed {self.item_type} archive {slug} as {destination}")

        if options.get("activate"):
            line(f"Activating '{destination}'...")
            return self.activate([destination])
        return 0

    def update(self, args: Sequence[str], options: Mapping[str, Any]) -> int:
        """Update one item, list pending updates, or update everything with --all."""
        self.updates.refresh()

        if args and not options.get("all"):
            file, _name = self.parse_name(args, "update")
            return 0 if self.installer.upgrade(file) else 1

        return self.update_multiple(args, options)

    def update_multiple(self, args: Sequence[str], options: Mapping[str, Any]) -> int:
        item_list = f"Available {self.item_type} updates:"
        items_to_update = []
        for file in self.get_item_list():
            if not self.has_update(file):
                continue
            items_to_update.append(file)
            item_list += f"\n\t%y{item_slug(file)}%n"

        if not items_to_update:
            line(f"No {self.item_type} updates available.")
            return 0

        if options.get("all"):
            result = self.installer.bulk_upgrade(items_to_update)

            num_to_update = len(items_to_update)
            num_updated = sum(1 for ok in result.values() if ok)

            summary = f"Updated {num_updated}/{num_to_update} {self.item_type}s."
            if num_updated == num_to_update:
                success(summary)
            elif num_updated > 0:
                warning(summary)
            else:
                error(summary)
                return 1
            return 0

        line(item_list)
        return 0

    # ── Status helpers ──────────────────────────────────────────────────────
    def has_update(self, file: str) -> bool:
        return file in self.updates.query()

    def format_status(self, status: str, form: str) -> str:
        return self.get_color(status) + STATUS_MAP[form][status]

    def show_legend(self) -> None:
        legend = {}
        for status in STATUS_MAP["short"]:
            legend[self.format_status(status, "short")] = STATUS_MAP["long"][status]
        legend[UPDATE_MARKER] = "Update Available"

        entries = [f"{key} = {title}%n" for key, title in legend.items()]
        line("Legend: " + ", ".join(entries))

    def get_color(self, status: str) -> str:
        return STATUS_COLORS[status]
