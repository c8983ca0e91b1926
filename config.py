"""Shared configuration constants for wp-upkeep.

Centralizes paths and runtime knobs used by modules. Each value can be
overridden from the environment.
"""

import os

SITE_ROOT_DIR = os.environ.get("UPKEEP_SITE_ROOT", "/srv/http")
WP_CLI_PATH = os.environ.get("UPKEEP_WP_CLI", "/usr/bin/wp")
WP_USER = os.environ.get("UPKEEP_WP_USER", "http")
WP_TIMEOUT = int(os.environ.get("WP_TIMEOUT", "600"))  # seconds
LOG_DIR = os.environ.get("UPKEEP_LOG_DIR", "")
