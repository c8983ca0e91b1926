"""Update availability as tracked by WordPress' update transients."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

from upkeep.utils import log
from .cli import wp_cmd, wp_cmd_json


class UpdateSource(ABC):
    """Answers which installed items have a newer package available."""

    @abstractmethod
    def refresh(self) -> None:
        """Force the framework to re-check for updates."""

    @abstractmethod
    def query(self) -> dict[str, dict]:
        """Current update snapshot: identifier -> update info."""


class WpCliUpdateSource(UpdateSource):
    """Reads the `update_plugins` / `update_themes` site transient via WP-CLI.

    `refresh` calls `wp_update_plugins()` (or `wp_update_themes()`) inside
    the site, which rewrites the transient. `query` never caches; every
    call reads the transient again.
    """

    def __init__(self, target: Union[str, Path], item_type: str):
        self.target = target
        self.item_type = item_type
        self.transient = f"update_{item_type}s"

    def refresh(self) -> None:
        ok = wp_cmd(self.target, ["eval", f"wp_update_{self.item_type}s();"])
        if not ok:
            logging.warning("Could not refresh %s update data", self.item_type)
            return
        log(f"Refreshed {self.transient}")

    def query(self) -> dict[str, dict]:
        ok, data = wp_cmd_json(self.target, ["transient", "get", self.transient, "--network"])
        if not ok or not isinstance(data, dict):
            return {}
        response = data.get("response")
        # PHP serializes an empty array as [] rather than {}
        if not isinstance(response, dict):
            return {}
        return response
