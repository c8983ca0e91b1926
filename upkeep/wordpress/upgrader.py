"""Package installation and upgrades for plugins and themes."""

from __future__ import annotations

import logging
import os
import zipfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Tuple, Union
from urllib.parse import urlsplit

from upkeep.utils import log
from .cli import wp_cmd, wp_cmd_json
from .wp_json import rows_by


def item_slug(file: str) -> str:
    """Name an item by its identifier.

    "akismet/akismet.php" -> "akismet", "hello.php" -> "hello",
    "twentytwentyfour" -> "twentytwentyfour".
    """
    if "/" not in file:
        base = os.path.basename(file)
        if base.endswith(".php"):
            return base[: -len(".php")]
        return base
    return os.path.dirname(file)


def is_url(path: Union[str, Path]) -> bool:
    return urlsplit(str(path)).scheme in ("http", "https", "ftp")


def archive_destination(path: Union[str, Path]) -> str:
    """Directory name a zip archive unpacks into.

    WordPress installs an archive into its single top-level folder; a flat
    archive lands in a folder named after the zip itself. Remote archives
    are not inspected and are named after the last segment of the URL.
    """
    if is_url(path):
        return Path(urlsplit(str(path)).path).stem
    fallback = Path(path).stem
    try:
        with zipfile.ZipFile(path) as zf:
            tops = {n.split("/", 1)[0] for n in zf.namelist() if n.strip("/")}
    except (OSError, zipfile.BadZipFile) as err:
        logging.debug("Could not inspect %s: %s", path, err)
        return fallback
    if len(tops) == 1:
        top = tops.pop()
        if not top.endswith(".php"):
            return top
    return fallback


class PackageInstaller(ABC):
    @abstractmethod
    def install_from_archive(self, path: str) -> Tuple[bool, str]:
        """Install a local zip; returns (ok, destination name)."""

    @abstractmethod
    def upgrade(self, file: str) -> bool:
        """Upgrade one installed item."""

    @abstractmethod
    def bulk_upgrade(self, files: Iterable[str]) -> dict[str, bool]:
        """Upgrade many items; returns identifier -> success."""


class WpCliInstaller(PackageInstaller):
    def __init__(self, target: Union[str, Path], item_type: str):
        self.target = target
        self.item_type = item_type

    def install_from_archive(self, path: str) -> Tuple[bool, str]:
        if not is_url(path) and not os.path.isfile(path):
            logging.error("Archive not found: %s", path)
            return False, ""
        ok = wp_cmd(self.target, [self.item_type, "install", path, "--force"])
        if not ok:
            return False, ""
        name = archive_destination(path)
        log(f"PASS: Installed {self.item_type} {name} from {path}")
        return True, name

    def upgrade(self, file: str) -> bool:
        slug = item_slug(file)
        ok = wp_cmd(self.target, [self.item_type, "update", slug])
        if not ok:
            logging.error("Could not update %s: %s", self.item_type, slug)
        return ok

    def bulk_upgrade(self, files: Iterable[str]) -> dict[str, bool]:
        files = list(files)
        if not files:
            return {}
        slugs = {file: item_slug(file) for file in files}
        ok, rows = wp_cmd_json(
            self.target,
            [self.item_type, "update", *slugs.values(), "--format=json"],
        )
        by_name = rows_by(rows, "name")
        if not by_name:
            # No per-item report; all-or-nothing from the exit status.
            return {file: ok for file in files}

        result: dict[str, bool] = {}
        for file, slug in slugs.items():
            row = by_name.get(slug)
            status = str(row.get("status", "")).strip().lower() if row else ""
            result[file] = status == "updated"
        return result
