import pytest

from upkeep import utils
from upkeep.wordpress.command import CommandWithUpgrade, ItemNotFound
from upkeep.wordpress.updates import UpdateSource
from upkeep.wordpress.upgrader import PackageInstaller, item_slug


class FakeUpdateSource(UpdateSource):
    def __init__(self, pending=None):
        self.pending = dict(pending or {})
        self.refreshes = 0

    def refresh(self):
        self.refreshes += 1

    def query(self):
        return dict(self.pending)


class FakeInstaller(PackageInstaller):
    def __init__(self, archive_result=(True, "zipped"), failing=()):
        self.archive_result = archive_result
        self.failing = set(failing)
        self.calls = []

    def install_from_archive(self, path):
        self.calls.append(("install", path))
        return self.archive_result

    def upgrade(self, file):
        self.calls.append(("upgrade", file))
        return file not in self.failing

    def bulk_upgrade(self, files):
        files = list(files)
        self.calls.append(("bulk", files))
        return {f: f not in self.failing for f in files}


class DictItemCommand(CommandWithUpgrade):
    """Command over a plain dict: identifier -> {"status", "version"}."""

    item_type = "plugin"

    def __init__(self, items, updates, installer):
        super().__init__(updates, installer)
        self.items = items
        self.status_all_calls = 0
        self.single = None
        self.repo_installs = []
        self.activated = []

    def parse_name(self, args, subcommand):
        name = args[0]
        for file in self.items:
            if name in (file, item_slug(file)):
                return file, item_slug(file)
        raise ItemNotFound(f"The plugin '{name}' could not be found.")

    def get_item_list(self):
        return list(self.items)

    def get_status(self, file):
        return self.items[file]["status"]

    def get_details(self, file):
        return {"Name": item_slug(file), "Version": self.items[file]["version"]}

    def status_all(self):
        self.status_all_calls += 1

    def _status_single(self, details, name, version, status):
        self.single = (details, name, version, status)

    def install_from_repo(self, slug, options):
        self.repo_installs.append((slug, dict(options)))
        return 0

    def activate(self, args, options=None):
        self.activated.append(list(args))
        return 0


@pytest.fixture(autouse=True)
def plain_output():
    utils.set_color(False)
    yield
    utils.set_color(None)


@pytest.fixture
def updates():
    return FakeUpdateSource()


@pytest.fixture
def installer():
    return FakeInstaller()


@pytest.fixture
def items():
    return {
        "akismet/akismet.php": {"status": "active", "version": "5.3"},
        "hello.php": {"status": "inactive", "version": "1.7.2"},
    }


@pytest.fixture
def command(items, updates, installer):
    return DictItemCommand(items, updates, installer)
