#!/usr/bin/env python3
"""Bring plugins and themes of one or more local sites up to date.

Inputs: site domains (or paths) via CLI, optional --check to only list
pending updates. Each site/item-type pair runs `python -m upkeep.wordpress`
in its own process so one broken site cannot stop the others.
"""
import os
import subprocess
import sys

from upkeep.utils import init_logging, log, status_fail, status_pass

# ─── CONFIG ──────────────────────────────────────────────────────────────
MOD_WP = "upkeep.wordpress"
ITEM_TYPES = ("plugin", "theme")
FLAG_CHECK = "--check"


# ─── CLI ─────────────────────────────────────────────────────────────────
def run_script(script_name: str, args: list[str]) -> bool:
    cmd = [sys.executable, "-m", script_name] + args
    log(f"run: {' '.join(cmd)}")
    proc = subprocess.run(cmd, text=True)
    if proc.returncode != 0:
        status_fail(f"{script_name} {' '.join(args)} exit={proc.returncode}; see log")
        return False
    return True


def step_update(site: str, item_type: str, check_only: bool) -> bool:
    args = [site, item_type, "update"]
    if not check_only:
        args.append("--all")
    return run_script(MOD_WP, args)


def upkeep_site(site: str, check_only: bool = False) -> bool:
    ok = True
    for item_type in ITEM_TYPES:
        if not step_update(site, item_type, check_only):
            ok = False
            continue
        status_pass(f"{site} {item_type}s")
    return ok


def main(argv: list[str]) -> int:
    rid = init_logging(None)
    check_only = FLAG_CHECK in argv
    sites = [a for a in argv if not a.startswith("--")]
    if not sites:
        status_fail(f"usage: [{FLAG_CHECK}] SITE [SITE ...]")
        return 1
    # Ensure subprocs share the run-id and log file
    os.environ["UPKEEP_RID"] = rid

    failed = [site for site in sites if not upkeep_site(site, check_only)]
    if failed:
        status_fail(f"{len(failed)}/{len(sites)} sites had errors: {', '.join(failed)}")
        return 1
    status_pass(f"{len(sites)} site(s) up to date")
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
