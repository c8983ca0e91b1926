"""WordPress plugin/theme upkeep.

Submodules:
- cli: WP-CLI wrappers
- wp_json: JSON extraction from WP-CLI output
- updates: update availability (site transients)
- upgrader: archive installs and upgrades
- command: shared status/install/update flow
- items: WP-CLI backed hooks for the concrete commands
- plugins / themes: the `plugin` and `theme` commands
"""

# Intentionally minimal; logic lives in submodules and __main__.
