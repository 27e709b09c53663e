"""Scenario test helpers for the templatespecs extension.

The ``ScenarioTest`` base class lives in
:mod:`azext_templatespecs.testing.base` and needs ``azure-cli-testsdk``.
"""

from azext_templatespecs.testing.scenario import (
    DEFAULT_API_VERSION_OVERRIDES,
    DEFAULT_IGNORED_PROVIDERS,
    RecordMatcherSettings,
    ScenarioContext,
    ScenarioError,
    ScenarioIdentity,
    provider_namespace,
)

__all__ = [
    "DEFAULT_API_VERSION_OVERRIDES",
    "DEFAULT_IGNORED_PROVIDERS",
    "RecordMatcherSettings",
    "ScenarioContext",
    "ScenarioError",
    "ScenarioIdentity",
    "provider_namespace",
]
