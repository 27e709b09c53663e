"""Scenario building blocks shared by the templatespecs scenario tests.

Recording, playback and live/playback mode selection belong to
``azure.cli.testsdk``; this module only holds what the SDK leaves to
each test suite:

- :class:`ScenarioIdentity` names the recording explicitly (suite + case).
- :class:`RecordMatcherSettings` decides which recorded requests match
  during playback and which api-version each management client is built
  with.
- :class:`ScenarioContext` builds the management clients a scenario
  needs, runs its steps in order and always tears down, even when a
  step fails.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable
from urllib.parse import parse_qs, urlparse

logger = logging.getLogger(__name__)

DEFAULT_IGNORED_PROVIDERS = (
    "Microsoft.Resources",
    "Microsoft.Features",
    "Microsoft.Authorization",
    "Microsoft.Network",
    "Microsoft.Compute",
)

DEFAULT_API_VERSION_OVERRIDES = {
    "ResourceManagementClient": "2016-02-01",
}

# ARM requests without a provider segment (subscriptions, resource groups)
# are served by the resources provider.
_DEFAULT_PROVIDER = "Microsoft.Resources"
_PROVIDER_SEGMENT = re.compile(r"/providers/([^/?]+)", re.IGNORECASE)


class ScenarioError(Exception):
    """Raised when a scenario cannot be set up."""


@dataclass(frozen=True)
class ScenarioIdentity:
    """Names the recording a scenario plays back."""

    suite: str
    case: str

    def __post_init__(self):
        for label, value in (("suite", self.suite), ("case", self.case)):
            if not value or "/" in value or "\\" in value:
                raise ScenarioError(f"Invalid scenario {label} name: '{value}'")

    @property
    def record_name(self) -> str:
        return f"{self.suite}/{self.case}"


def provider_namespace(uri: str) -> str:
    """Return the resource provider a management request is addressed to.

    Nested resources report the innermost provider.
    """
    matches = _PROVIDER_SEGMENT.findall(urlparse(uri).path)
    return matches[-1] if matches else _DEFAULT_PROVIDER


def _normalized_query(uri: str) -> dict[str, list[str]]:
    query = parse_qs(urlparse(uri).query, keep_blank_values=True)
    return {key.lower(): [v.lower() for v in values] for key, values in query.items()}


@dataclass
class RecordMatcherSettings:
    """How recorded requests are matched and clients are built.

    Requests to ``ignore_resource_providers`` match regardless of their
    api-version.  ``api_version_overrides`` pins the api-version a
    management client (by client class name) is built with.
    """

    ignore_resource_providers: tuple[str, ...] = DEFAULT_IGNORED_PROVIDERS
    api_version_overrides: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_API_VERSION_OVERRIDES))

    def ignores_provider(self, provider: str) -> bool:
        return provider.lower() in {p.lower() for p in self.ignore_resource_providers}

    def api_version_for(self, client_name: str) -> str | None:
        return self.api_version_overrides.get(client_name)

    def queries_match(self, recorded, incoming) -> bool:
        """vcrpy ``query`` matcher: same parameters, compared case-insensitively.

        ``api-version`` is left out of the comparison for requests to an
        ignored provider.
        """
        q1 = _normalized_query(recorded.uri)
        q2 = _normalized_query(incoming.uri)
        if self.ignores_provider(provider_namespace(recorded.uri)):
            q1.pop("api-version", None)
            q2.pop("api-version", None)
        return q1 == q2


ClientFactory = Callable[[Any, "ScenarioContext"], Any]
Step = Callable[["ScenarioContext"], Any]


class ScenarioContext:
    """Clients and cleanups for one scenario run, built and torn down together.

    Use as a context manager::

        with ScenarioContext(identity, client_specs={"templatespecs": ResourceType.MGMT_RESOURCE_TEMPLATESPECS},
                             client_factory=factory) as ctx:
            ctx.run(step_one, step_two)

    Clients are available as ``ctx.clients["templatespecs"]`` or
    ``ctx.templatespecs`` once the context is entered.
    """

    def __init__(
        self,
        identity: ScenarioIdentity,
        *,
        client_specs: dict[str, Any],
        client_factory: ClientFactory,
        helper_factories: dict[str, Callable[["ScenarioContext"], Any]] | None = None,
    ):
        self.identity = identity
        self.clients: dict[str, Any] = {}
        self.helpers: dict[str, Any] = {}
        self._client_specs = dict(client_specs)
        self._client_factory = client_factory
        self._helper_factories = dict(helper_factories or {})
        self._cleanups: list[Callable[[], Any]] = []
        self._active = False

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def __enter__(self) -> "ScenarioContext":
        self.setup()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        # A failing step wins over a failing cleanup.
        self.teardown(raise_errors=exc_type is None)

    def setup(self) -> None:
        """Build clients, then helpers."""
        if self._active:
            raise ScenarioError(f"Scenario {self.identity.record_name} is already running")

        logger.debug("Starting scenario %s", self.identity.record_name)
        self._active = True
        try:
            for attr, client_spec in self._client_specs.items():
                self.clients[attr] = self._client_factory(client_spec, self)
            for name, factory in self._helper_factories.items():
                self.helpers[name] = factory(self)
        except Exception:
            self.teardown(raise_errors=False)
            raise

    def teardown(self, raise_errors: bool = True) -> None:
        """Run cleanups in reverse order, then close clients.

        Every cleanup runs even if an earlier one fails.  The first
        failure is re-raised afterwards when *raise_errors* is set.
        """
        if not self._active:
            return

        first_error: BaseException | None = None
        for cleanup in reversed(self._cleanups):
            try:
                cleanup()
            except Exception as exc:
                logger.warning("Cleanup for %s failed: %s", self.identity.record_name, exc)
                first_error = first_error or exc

        for attr, client in self.clients.items():
            close = getattr(client, "close", None)
            if callable(close):
                try:
                    close()
                except Exception as exc:
                    logger.warning("Closing client '%s' failed: %s", attr, exc)

        self._cleanups.clear()
        self.clients.clear()
        self.helpers.clear()
        self._active = False
        logger.debug("Finished scenario %s", self.identity.record_name)

        if first_error is not None and raise_errors:
            raise first_error

    def add_cleanup(self, cleanup: Callable[[], Any]) -> None:
        """Register *cleanup* to run at teardown (last registered runs first)."""
        self._cleanups.append(cleanup)

    # ------------------------------------------------------------------ #
    # Execution
    # ------------------------------------------------------------------ #

    def run(self, *steps: Step) -> list[Any]:
        """Run *steps* in order, passing this context; return their results."""
        if not self._active:
            raise ScenarioError("Scenario steps must run inside an active ScenarioContext")
        results = []
        for step in steps:
            logger.debug("Running step %s", getattr(step, "__name__", step))
            results.append(step(self))
        return results

    def __getattr__(self, name: str) -> Any:
        clients = self.__dict__.get("clients", {})
        if name in clients:
            return clients[name]
        raise AttributeError(name)
