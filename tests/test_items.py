from unittest.mock import patch

import pytest

from upkeep import utils
from upkeep.wordpress import items
from upkeep.wordpress.command import CommandError, ItemNotFound
from upkeep.wordpress.plugins import PluginCommand
from upkeep.wordpress.themes import ThemeCommand

from conftest import FakeInstaller, FakeUpdateSource

PLUGIN_ROWS = [
    {"name": "akismet", "status": "active", "version": "5.3", "file": "akismet/akismet.php"},
    {"name": "hello", "status": "inactive", "version": "1.7.2", "file": "hello.php"},
    {"name": "object-cache", "status": "dropin", "version": "", "file": "object-cache.php"},
    {"name": "multi", "status": "active-network", "version": "2.0", "file": "multi/multi.php"},
]

THEME_ROWS = [
    {"name": "twentytwentyfour", "status": "active", "version": "1.1"},
    {"name": "twentytwentythree", "status": "parent", "version": "1.3"},
    {"name": "astra", "status": "inactive", "version": "4.6"},
]


def _rows(rows):
    return patch.object(items, "wp_cmd_json", return_value=(True, rows))


@pytest.fixture
def plugin():
    return PluginCommand("example.local", updates=FakeUpdateSource(), installer=FakeInstaller())


@pytest.fixture
def theme():
    return ThemeCommand("example.local", updates=FakeUpdateSource(), installer=FakeInstaller())


def test_plugin_item_list(plugin):
    with _rows(PLUGIN_ROWS) as wp_cmd_json:
        assert plugin.get_item_list() == [
            "akismet/akismet.php", "hello.php", "object-cache.php", "multi/multi.php",
        ]
    wp_cmd_json.assert_called_once_with(
        "example.local", ["plugin", "list", "--fields=name,status,version,file"]
    )


def test_plugin_parse_name(plugin):
    with _rows(PLUGIN_ROWS):
        assert plugin.parse_name(["akismet"], "status") == ("akismet/akismet.php", "akismet")
        assert plugin.parse_name(["hello.php"], "update") == ("hello.php", "hello")


def test_plugin_parse_name_unknown(plugin):
    with _rows(PLUGIN_ROWS):
        with pytest.raises(ItemNotFound, match="The plugin 'jetpack' could not be found."):
            plugin.parse_name(["jetpack"], "status")


def test_plugin_parse_name_needs_one_name(plugin):
    with pytest.raises(CommandError, match="usage: wp plugin update <plugin-name>"):
        plugin.parse_name(["a", "b"], "update")


@pytest.mark.parametrize(
    "file, expected",
    [
        ("akismet/akismet.php", "active"),
        ("hello.php", "inactive"),
        ("object-cache.php", "must-use"),
        ("multi/multi.php", "active-network"),
    ],
)
def test_plugin_status(plugin, file, expected):
    with _rows(PLUGIN_ROWS):
        assert plugin.get_status(file) == expected


def test_plugin_details(plugin):
    data = {
        "name": "akismet",
        "title": "Akismet Anti-spam",
        "version": "5.3",
        "author": "Automattic",
        "description": "Spam protection.",
    }
    with _rows(data) as wp_cmd_json:
        details = plugin.get_details("akismet/akismet.php")
    assert details == {
        "Name": "Akismet Anti-spam",
        "Version": "5.3",
        "Author": "Automattic",
        "Description": "Spam protection.",
    }
    assert wp_cmd_json.call_args.args[1][:3] == ["plugin", "get", "akismet"]


def test_plugin_status_single(plugin, capsys):
    data = {
        "name": "akismet",
        "title": "Akismet",
        "version": "5.3",
        "author": "Automattic",
        "description": "Spam",
    }
    # list (name lookup), get (details), list (status lookup)
    responses = [(True, PLUGIN_ROWS), (True, data), (True, PLUGIN_ROWS)]
    plugin.updates.pending = {"akismet/akismet.php": {}}
    with patch.object(items, "wp_cmd_json", side_effect=responses):
        assert plugin.status(["akismet"]) == 0

    out = capsys.readouterr().out.splitlines()
    assert out == [
        "Plugin akismet details:",
        "    Name: Akismet",
        "    Status: Active",
        "    Version: 5.3 (Update available)",
        "    Author: Automattic",
        "    Description: Spam",
    ]


def test_plugin_status_all(plugin, capsys):
    plugin.updates.pending = {"hello.php": {}}
    with _rows(PLUGIN_ROWS):
        plugin.status_all()

    out = capsys.readouterr().out.splitlines()
    assert out[0] == "4 installed plugins:"
    assert out[1] == "   A akismet"
    assert out[2] == "  UI hello"
    assert out[3] == "   M object-cache"
    assert out[4] == "   N multi"
    assert out[-1].startswith("Legend: I = Inactive")


def test_plugin_install_from_repo(plugin, capsys):
    with patch.object(items, "wp_cmd", return_value=True) as wp_cmd:
        assert plugin.install_from_repo("jetpack", {"version": "13.0", "activate": True}) == 0
    wp_cmd.assert_called_once_with(
        "example.local", ["plugin", "install", "jetpack", "--version=13.0", "--activate"]
    )
    assert "Success: Installed plugin 'jetpack'." in capsys.readouterr().out


def test_plugin_install_from_repo_failure(plugin, capsys):
    with patch.object(items, "wp_cmd", return_value=False):
        assert plugin.install_from_repo("nope", {}) == 1
    assert "Error: Could not install plugin 'nope'." in capsys.readouterr().err


def test_plugin_activate_network(plugin):
    with patch.object(items, "wp_cmd", return_value=True) as wp_cmd:
        assert plugin.activate(["akismet", "hello"], {"network": True}) == 0
    assert [c.args[1] for c in wp_cmd.call_args_list] == [
        ["plugin", "activate", "akismet", "--network"],
        ["plugin", "activate", "hello", "--network"],
    ]


def test_plugin_deactivate_reports_failures(plugin, capsys):
    with patch.object(items, "wp_cmd", side_effect=[True, False]):
        assert plugin.deactivate(["akismet", "hello"]) == 1
    assert "Could not deactivate plugin 'hello'." in capsys.readouterr().err


def test_plugin_activate_without_names(plugin, capsys):
    assert plugin.activate([]) == 1
    assert "usage: wp plugin activate" in capsys.readouterr().out


def test_theme_status(theme):
    with _rows(THEME_ROWS):
        assert theme.get_item_list() == ["twentytwentyfour", "twentytwentythree", "astra"]
        assert theme.get_status("twentytwentyfour") == "active"
        assert theme.get_status("twentytwentythree") == "inactive"
        assert theme.get_status("astra") == "inactive"


def test_theme_status_unknown(theme):
    with _rows(THEME_ROWS):
        with pytest.raises(ItemNotFound):
            theme.get_status("divi")


def test_theme_activate_single_name(theme, capsys):
    assert theme.activate(["a", "b"]) == 1
    assert "usage: wp theme activate <theme-name>" in capsys.readouterr().out
    with patch.object(items, "wp_cmd", return_value=True) as wp_cmd:
        assert theme.activate(["astra"]) == 0
    wp_cmd.assert_called_once_with("example.local", ["theme", "activate", "astra"])


def test_theme_update_lists_pending(theme, capsys):
    theme.updates.pending = {"astra": {"new_version": "4.7"}}
    with _rows(THEME_ROWS):
        assert theme.update([], {}) == 0
    assert capsys.readouterr().out == "Available theme updates:\n\tastra\n"


def test_plugin_status_all_resets_update_marker_color(plugin, capsys):
    plugin.updates.pending = {"hello.php": {}}
    utils.set_color(True)
    with _rows(PLUGIN_ROWS):
        plugin.status_all()

    out = capsys.readouterr().out.splitlines()
    assert out[2] == "  \x1b[33mU\x1b[0mI hello\x1b[0m"


def test_plugin_details_fall_back_to_list_row(plugin):
    # `plugin get` fails for must-use plugins; the list row still has name/version
    mu_rows = PLUGIN_ROWS + [
        {"name": "mu-loader", "status": "must-use", "version": "0.9", "file": "mu-loader.php"},
    ]
    responses = [(False, []), (True, mu_rows)]
    with patch.object(items, "wp_cmd_json", side_effect=responses):
        details = plugin.get_details("mu-loader.php")
    assert details == {"Name": "mu-loader", "Version": "0.9", "Author": "", "Description": ""}


def test_plugin_status_single_for_must_use(plugin, capsys):
    mu_rows = PLUGIN_ROWS + [
        {"name": "mu-loader", "status": "must-use", "version": "0.9", "file": "mu-loader.php"},
    ]
    # list (name lookup), failed get, list (details), list (status)
    responses = [(True, mu_rows), (False, []), (True, mu_rows), (True, mu_rows)]
    with patch.object(items, "wp_cmd_json", side_effect=responses):
        assert plugin.status(["mu-loader"]) == 0

    out = capsys.readouterr().out.splitlines()
    assert "    Status: Must Use" in out
    assert "    Version: 0.9" in out
