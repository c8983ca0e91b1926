"""Utility helpers kept dependency-free.

- init_logging: configure console + file logging with run-id.
- status_pass/status_fail: concise console status lines (with run-id).
- log: debug-level logger for normal status lines (file-oriented).
- colorize: render WP-CLI style %-color tokens as ANSI or strip them.
- line/success/warning/error: user-facing messages in WP-CLI's voice.
- _http_uid: resolve uid for the web server user or -1 if missing.
- _normalize_wp_parts: parse WP-CLI command into argv parts.
"""

import json
import logging
import os
import pwd
import re
import shlex
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Sequence

from config import LOG_DIR, WP_USER


_RUN_ID = ""
_COLOR: bool | None = None


def _gen_run_id() -> str:
    import uuid

    return uuid.uuid4().hex[:8]


def init_logging(run_id: str | None = None) -> str:
    """Initialize logging with console + rotating file handlers.

    - Console: CRITICAL only; the tool prints its own output.
    - File: DEBUG+, rich format, written to log/upkeep-<rid>.log
    Returns the run-id used.
    """
    global _RUN_ID
    if _RUN_ID:
        return _RUN_ID

    rid = run_id or os.environ.get("UPKEEP_RID") or _gen_run_id()
    _RUN_ID = rid

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    if LOG_DIR:
        log_dir = LOG_DIR
    else:
        # Project root = parent of 'upkeep'
        root_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
        log_dir = os.path.join(root_dir, "log")
    try:
        os.makedirs(log_dir, exist_ok=True)
        logfile = os.path.join(log_dir, f"upkeep-{rid}.log")
    except OSError:
        logfile = os.path.abspath(f"upkeep-{rid}.log")

    # Quiet any pre-existing console handlers
    for h in list(root.handlers):
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler):
            h.setLevel(logging.CRITICAL)

    has_file = False
    for h in root.handlers:
        if isinstance(h, RotatingFileHandler) and getattr(h, "baseFilename", "").endswith(
            os.path.basename(logfile)
        ):
            has_file = True
            break
    if not has_file:
        fh = RotatingFileHandler(logfile, maxBytes=5 * 1024 * 1024, backupCount=3)
        fh.setLevel(logging.DEBUG)
        ffmt = logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
        fh.setFormatter(ffmt)
        root.addHandler(fh)

    if not any(
        isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
        for h in root.handlers
    ):
        ch = logging.StreamHandler()
        ch.setLevel(logging.CRITICAL)
        ch.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        root.addHandler(ch)

    logging.debug("Logging initialized. run_id=%s file=%s", rid, logfile)
    os.environ["UPKEEP_RID"] = rid
    return rid


def _rid() -> str:
    return _RUN_ID or os.environ.get("UPKEEP_RID", "--------")


def status_pass(msg: str) -> None:
    print(f"PASS: {msg} [{_rid()}]")


def status_fail(msg: str) -> None:
    print(f"FAIL: {msg} [{_rid()}]", flush=True)


def log(msg: str) -> None:
    # File-oriented normal progress; stays out of console noise.
    logging.debug(msg)


# ── Colors ──────────────────────────────────────────────────────────────────────
COLOR_TOKENS = {
    "%n": "\x1b[0m",
    "%g": "\x1b[32m",
    "%y": "\x1b[33m",
    "%r": "\x1b[31m",
    "%c": "\x1b[36m",
    "%b": "\x1b[34m",
    "%G": "\x1b[32;1m",
    "%Y": "\x1b[33;1m",
    "%R": "\x1b[31;1m",
}
_TOKEN_RE = re.compile("|".join(re.escape(t) for t in COLOR_TOKENS))


def set_color(enabled: bool | None) -> None:
    """Force color on/off; None restores auto-detection."""
    global _COLOR
    _COLOR = enabled


def use_color() -> bool:
    if _COLOR is not None:
        return _COLOR
    if os.environ.get("NO_COLOR"):
        return False
    return sys.stdout.isatty()


def colorize(text: str, enabled: bool | None = None) -> str:
    if enabled is None:
        enabled = use_color()
    if enabled:
        return _TOKEN_RE.sub(lambda m: COLOR_TOKENS[m.group(0)], text)
    return _TOKEN_RE.sub("", text)


def line(msg: str = "") -> None:
    print(colorize(msg))


def success(msg: str) -> None:
    print(colorize(f"%GSuccess:%n {msg}"))
    log(f"PASS: {msg}")


def warning(msg: str) -> None:
    print(colorize(f"%YWarning:%n {msg}"), file=sys.stderr)
    logging.warning(msg)


def error(msg: str) -> None:
    print(colorize(f"%RError:%n {msg}"), file=sys.stderr)
    logging.error(msg)


def _http_uid() -> int:
    try:
        return pwd.getpwnam(WP_USER).pw_uid
    except KeyError:
        return -1


def _normalize_wp_parts(command: str | Sequence[str]) -> list[str]:
    """Normalize command into argv parts.
    Accepts str (parsed with shlex) or sequence of strings.
    Returns a list; empty list indicates an error already reported.
    """
    if command is None:
        logging.error("wp called with None command")
        return []
    if isinstance(command, str):
        text = command.strip()
        if not text:
            logging.error("wp called with empty command")
            return []
        try:
            return shlex.split(text)
        except ValueError as err:
            logging.error("Could not parse command: %s", err)
            return []
    if isinstance(command, (list, tuple)):
        parts = [str(p) for p in command]
        if not parts:
            logging.error("wp called with empty argv list")
            return []
        return parts
    logging.error("Unsupported command type: %s", type(command).__name__)
    return []


def _strip_ansi(text: str) -> str:
    return re.sub(r"\x1b\[[0-9;]*[A-Za-z]", "", text)


def parse_json_relaxed(text: str, default: Any) -> Any:
    """Parse JSON with basic tolerance for noise.

    - Strips BOM and ANSI codes
    - Extracts substring between first '[' and last ']' or first '{' and last '}'
    - Returns default on failure
    """
    if text is None:
        return default
    s = _strip_ansi(text.lstrip("\ufeff").strip())
    try:
        return json.loads(s)
    except ValueError:
        pass
    for open_c, close_c in (("[", "]"), ("{", "}")):
        lb = s.find(open_c)
        rb = s.rfind(close_c)
        if lb != -1 and rb > lb:
            try:
                return json.loads(s[lb : rb + 1])
            except ValueError:
                continue
    return default
