"""Theme management: `wp theme status|install|update|activate`."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from upkeep.utils import line
from .items import WpCliItemCommand


class ThemeCommand(WpCliItemCommand):
    item_type = "theme"
    list_fields = "name,status,version"

    def get_status(self, file: str, row: dict | None = None) -> str:
        if row is None:
            row = self._row(file)
        # WP-CLI also reports "parent" for the active theme's template
        if str(row.get("status", "")).strip().lower() == "active":
            return "active"
        return "inactive"

    def activate(self, args: Sequence[str], options: Mapping[str, Any] | None = None) -> int:
        if len(args) != 1:
            line("usage: wp theme activate <theme-name>")
            return 1
        return self._toggle("activate", args)
