"""Shared test fixtures for azext_templatespecs tests."""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from azext_templatespecs.completion.enumerator import NamedItem, Page


# ------------------------------------------------------------------
# Global: prevent real telemetry HTTP calls and stray user config
# ------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _no_telemetry_network():
    """Stub the App Insights POST so commands never reach the network."""
    with patch("azext_templatespecs.telemetry._send_envelope", return_value=True):
        yield


@pytest.fixture(autouse=True)
def _isolated_config_dir(tmp_path, monkeypatch):
    """Point AZURE_CONFIG_DIR at a temp directory and clear overrides."""
    config_dir = tmp_path / "azure-config"
    config_dir.mkdir()
    monkeypatch.setenv("AZURE_CONFIG_DIR", str(config_dir))
    monkeypatch.delenv("AZURE_TEMPLATESPECS_STRICT_MODE", raising=False)
    monkeypatch.delenv("AZURE_TEMPLATESPECS_TIMEOUT", raising=False)
    monkeypatch.delenv("APPINSIGHTS_CONNECTION_STRING", raising=False)
    monkeypatch.delenv("AZURE_CORE_COLLECT_TELEMETRY", raising=False)
    return config_dir


# ------------------------------------------------------------------
# Clock and lister fakes
# ------------------------------------------------------------------

class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start=100.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeLister:
    """Serves scripted pages, advancing the clock by each page's cost.

    Each page spec is a dict with ``names`` and optional ``cost``
    (seconds) and ``error`` (raised instead of returning the page).
    """

    def __init__(self, clock, pages, description="built-in template specs"):
        self._clock = clock
        self._pages = pages
        self.description = description
        self.calls = []

    def fetch_first_page(self):
        self.calls.append(None)
        return self._serve(0)

    def fetch_next_page(self, continuation_token):
        self.calls.append(continuation_token)
        return self._serve(int(continuation_token.split("-")[1]))

    def _serve(self, index):
        spec = self._pages[index]
        self._clock.advance(spec.get("cost", 0))
        if "error" in spec:
            raise spec["error"]
        token = f"page-{index + 1}" if index + 1 < len(self._pages) else None
        return Page(items=[NamedItem(n) for n in spec["names"]], continuation_token=token)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_lister(clock):
    """Factory: ``make_lister([{"names": [...], "cost": 1.0}, ...])``."""

    def _make(pages, description="built-in template specs"):
        return FakeLister(clock, pages, description)

    return _make


# ------------------------------------------------------------------
# Azure SDK paging fakes
# ------------------------------------------------------------------

class FakePageIterator:
    """Mimics ``azure.core.paging.PageIterator`` over in-memory pages."""

    def __init__(self, pages, continuation_token):
        self._pages = pages
        self._index = int(continuation_token) if continuation_token else 0
        self.continuation_token = continuation_token

    def __iter__(self):
        return self

    def __next__(self):
        if self._index >= len(self._pages):
            raise StopIteration
        page = self._pages[self._index]
        self._index += 1
        self.continuation_token = str(self._index) if self._index < len(self._pages) else None
        return iter(page)


class FakeItemPaged:
    """Mimics ``azure.core.paging.ItemPaged``."""

    def __init__(self, *pages):
        self._pages = [[SimpleNamespace(name=n) for n in page] for page in pages]

    def by_page(self, continuation_token=None):
        return FakePageIterator(self._pages, continuation_token)

    def __iter__(self):
        for page in self._pages:
            yield from page


@pytest.fixture
def item_paged():
    """Factory: ``item_paged(["a", "b"], ["c"])`` builds a two-page pager."""
    return FakeItemPaged


@pytest.fixture
def mock_client(item_paged):
    """A TemplateSpecsClient stand-in with a few built-ins and user specs."""
    client = MagicMock()
    client.template_specs.list_built_ins.return_value = item_paged(
        ["AzureKubernetesService", "appService"],
        ["AzureFunctions", "StorageAccount"],
    )
    client.template_spec_versions.list_built_ins.return_value = item_paged(["1.0", "1.1", "2.0"])
    client.template_specs.list_by_resource_group.return_value = [SimpleNamespace(name="rgSpec")]
    client.template_specs.list_by_subscription.return_value = [SimpleNamespace(name="subSpec")]
    client.template_spec_versions.list.return_value = [SimpleNamespace(name="0.1")]
    return client


@pytest.fixture
def mock_cmd():
    cmd = MagicMock()
    cmd.cli_ctx = MagicMock()
    return cmd
