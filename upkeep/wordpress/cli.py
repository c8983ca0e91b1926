# cli.py
# Invariants (WP-CLI JSON consistency):
# - All WP-CLI access goes through these wrappers; callers never build flags.
# - Read-ish commands are coerced to JSON at the source by appending:
#     --format=json --quiet --no-color --skip-plugins --skip-themes
# - Parsing strips ANSI and PHP/WP noise and extracts real JSON when present.
# - Accept commands with or without leading "wp"/"--path"; sanitize duplicates.
# - Logs: one PASS/FAIL per call; console stays minimal; file logs keep details.

from __future__ import annotations

import json
import logging
import os
import os.path
import re
import subprocess
import time
from pathlib import Path
from typing import Any, Tuple, Union

from config import SITE_ROOT_DIR, WP_CLI_PATH, WP_TIMEOUT, WP_USER
from upkeep.utils import _http_uid, _normalize_wp_parts, log, parse_json_relaxed
from .wp_json import extract_json_blob

os.environ.setdefault("WP_CLI_DISABLE_AUTO_CHECK_UPDATE", "1")
os.environ.setdefault("WP_CLI_SILENCE_PHP_ERRORS", "1")
os.environ.setdefault("WP_CLI_PHP_ARGS", "-d display_errors=0 -d display_startup_errors=0")

# ── Noise filters ───────────────────────────────────────────────────────────────
ANSI_RE = re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]")
NOISE_PREFIXES = (
    "PHP Warning:", "PHP Notice:", "PHP Deprecated:", "PHP Fatal error:",
    "Warning:", "Notice:", "Deprecated:", "Fatal error:", "PHP:"
)
NOISE_PATTERNS = (
    re.compile(r"^#\d+:"),               # stack frames
    re.compile(r"^'trace'\s*=>"),
    re.compile(r"^\)\]$"),
)

READ_VERBS = frozenset({"list", "get", "search"})


def _strip_ansi(s: str) -> str:
    return ANSI_RE.sub("", s)


def _drop_noise_lines(text: str) -> list[str]:
    out: list[str] = []
    for ln in text.splitlines():
        ln = ln.strip()
        if not ln:
            continue
        if ln.startswith(NOISE_PREFIXES):
            continue
        if any(p.search(ln) for p in NOISE_PATTERNS):
            continue
        out.append(ln)
    return out


# ── Internal helpers ────────────────────────────────────────────────────────────
def site_path(target: Union[str, Path]) -> Path:
    """Resolve a domain or filesystem path to the WordPress root."""
    if isinstance(target, Path):
        return target
    text = str(target)
    if os.path.isabs(text) or os.path.isdir(text):
        return Path(text)
    return Path(SITE_ROOT_DIR) / text


def _wp_base_argv(path: Path) -> list[str]:
    parts = [WP_CLI_PATH, f"--path={path}"]
    http_uid = _http_uid()
    if http_uid <= 0:
        return parts
    if os.geteuid() == http_uid:
        return parts
    return ["sudo", "-u", WP_USER] + parts


def _sanitize_parts(parts: list[str]) -> list[str]:
    # drop any leading 'wp' or explicit binary tokens
    while parts and (parts[0] == "wp" or os.path.basename(parts[0]) == "wp"):
        parts = parts[1:]
    # drop any --path passed by caller (we provide our own)
    cleaned: list[str] = []
    skip_next = False
    for i, p in enumerate(parts):
        if skip_next:
            skip_next = False
            continue
        if p.startswith("--path="):
            continue
        if p == "--path":
            if i + 1 < len(parts) and not parts[i + 1].startswith("-"):
                skip_next = True
            continue
        cleaned.append(p)
    return cleaned


def _ensure_quiet_flags(parts: list[str]) -> list[str]:
    if "--no-color" not in parts:
        parts.append("--no-color")
    if "--quiet" not in parts:
        parts.append("--quiet")
    return parts


def _fmt_cmd_for_log(args: list[str]) -> str:
    if not args:
        return ""
    start = 0
    if args[0] == "sudo" and len(args) >= 4 and args[1] == "-u":
        start = 3
    # replace absolute binary path with 'wp' for readability
    return " ".join(["wp"] + args[start + 1:])


def _wp_run(target: Union[str, Path], command, timeout: int = WP_TIMEOUT) -> Tuple[bool, str, str, int]:
    path = site_path(target)
    parts = _normalize_wp_parts(command)
    if not parts:
        return False, "", "Invalid command", 1
    parts = _sanitize_parts(parts)
    parts = _ensure_quiet_flags(parts)

    args = _wp_base_argv(path) + parts

    t0 = time.monotonic()
    try:
        proc = subprocess.run(
            args,
            text=True,
            capture_output=True,
            timeout=timeout,
            env=os.environ.copy(),
            encoding="utf-8",
            errors="replace",
        )
    except subprocess.TimeoutExpired:
        dt = time.monotonic() - t0
        logging.error("%s timeout after %.1fs", _fmt_cmd_for_log(args), dt)
        return False, "", f"timeout after {dt:.1f}s", 124
    except FileNotFoundError as err:
        logging.error("%s could not start: %s", _fmt_cmd_for_log(args), err)
        return False, "", str(err), 127

    dt = time.monotonic() - t0
    ok = proc.returncode == 0
    if ok:
        log(f"PASS: {_fmt_cmd_for_log(args)} ({dt:.1f}s)")
    else:
        clean_err = "\n".join(_drop_noise_lines(proc.stderr or ""))
        logging.error(
            "%s exit=%s\nSTDERR: %s",
            _fmt_cmd_for_log(args),
            proc.returncode,
            clean_err.strip(),
        )
    return ok, (proc.stdout or ""), (proc.stderr or ""), proc.returncode


# ── Parsing ─────────────────────────────────────────────────────────────────────
def _parse_json_loose(combined: str) -> Any | None:
    """
    Best-effort JSON parse with noise scrubbing.
    Order:
      1) Strip ANSI; drop PHP/WP noise lines.
      2) Extract embedded JSON container if present and parse strictly/relaxed.
      3) If single clean line, try json.loads; else keep it as a string.
      4) None if nothing usable.
    """
    cleaned_text = "\n".join(_drop_noise_lines(_strip_ansi(combined))).strip()
    if not cleaned_text:
        return None

    blob = extract_json_blob(cleaned_text)
    if blob is not None:
        try:
            return json.loads(blob)
        except ValueError:
            return parse_json_relaxed(blob, default=None)

    lines = cleaned_text.splitlines()
    if len(lines) == 1:
        try:
            return json.loads(lines[0])
        except ValueError:
            return lines[0]
    return lines


# ── Public API ──────────────────────────────────────────────────────────────────
def _looks_like_read_cmd(parts: list[str]) -> bool:
    if READ_VERBS.intersection(parts):
        return True
    return any(p.startswith("--fields=") for p in parts)


def _append_format_json(parts: list[str]) -> list[str]:
    parts = parts[:] + ["--format=json"]
    # reduce boot/plugin noise for read-ish commands
    for flag in ("--skip-plugins", "--skip-themes"):
        if flag not in parts:
            parts.append(flag)
    return parts


def wp_cmd_json(target: Union[str, Path], command: Any, timeout: int = WP_TIMEOUT) -> Tuple[bool, Any]:
    """Run a WP-CLI command and return (ok, parsed output).

    Read-ish commands without an explicit --format are coerced to JSON.
    Unparseable output from a read-ish command yields an empty list.
    """
    parts = _sanitize_parts(_normalize_wp_parts(command))

    readish = bool(parts) and _looks_like_read_cmd(parts)
    if readish and not any(p.startswith("--format=") for p in parts):
        parts = _append_format_json(parts)
        logging.debug("Augmented command with --format=json etc.")
    ok, out, err, _code = _wp_run(target, parts, timeout=timeout)

    if err:
        logging.debug("Stderr (len %d): %s", len(err), _drop_noise_lines(err)[:3])

    data = _parse_json_loose(out)
    if data is None:
        if readish:
            logging.warning("wp_cmd_json: returning empty array because JSON parse failed")
        data = []
    return ok, data


def wp_cmd(target: Union[str, Path], command, timeout: int = WP_TIMEOUT) -> bool:
    """Boolean wrapper. Runs the command and discards its output."""
    ok, _, _, _ = _wp_run(target, command, timeout=timeout)
    return ok
