"""Plugin management: `wp plugin status|install|update|activate|deactivate`."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from upkeep.utils import line
from .items import WpCliItemCommand

# WP-CLI reports drop-ins alongside must-use plugins; both live outside
# wp-content/plugins and cannot be toggled.
PLUGIN_STATUSES = {
    "active": "active",
    "active-network": "active-network",
    "must-use": "must-use",
    "dropin": "must-use",
}


class PluginCommand(WpCliItemCommand):
    item_type = "plugin"
    list_fields = "name,status,version,file"

    def item_file(self, row: dict) -> str:
        return str(row.get("file") or row.get("name") or "").strip()

    def get_status(self, file: str, row: dict | None = None) -> str:
        if row is None:
            row = self._row(file)
        status = str(row.get("status", "")).strip().lower()
        return PLUGIN_STATUSES.get(status, "inactive")

    def activate(self, args: Sequence[str], options: Mapping[str, Any] | None = None) -> int:
        if not args:
            line("usage: wp plugin activate <plugin-name>...")
            return 1
        extra = ["--network"] if options and options.get("network") else []
        return self._toggle("activate", args, extra)

    def deactivate(self, args: Sequence[str], options: Mapping[str, Any] | None = None) -> int:
        if not args:
            line("usage: wp plugin deactivate <plugin-name>...")
            return 1
        extra = ["--network"] if options and options.get("network") else []
        return self._toggle("deactivate", args, extra)
