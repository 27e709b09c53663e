"""Argument completers for template spec names and versions.

Each completer picks one of two strategies per request:

- ``BuiltInStrategy`` when the built-in flag is set on the parsed
  arguments: list the tenant's built-in template specs (or versions of
  one) under a deadline, then prefix-filter and sort them.
- ``DelegatedStrategy`` otherwise: list the template specs (or versions)
  the user owns in the selected resource group, filtered the same way.

Completion runs inside argcomplete, so outside strict mode a failure of
any kind produces an empty list instead of a traceback.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable

from azext_templatespecs.completion.enumerator import Clock, Deadline, Lister, enumerate_built_ins
from azext_templatespecs.completion.filter import CompletionSuggestion, filter_candidates, to_suggestions
from azext_templatespecs.completion.listers import built_in_template_spec_lister, built_in_version_lister
from azext_templatespecs.config import CompletionSettings

logger = logging.getLogger(__name__)

ClientFactory = Callable[[Any], Any]


@dataclass(frozen=True)
class CompleterOptions:
    """Names of the parsed-argument attributes a completer reads."""

    built_in_flag_name: str = "built_in"
    resource_group_parameter_name: str = "resource_group_name"
    name_parameter_name: str = "name"

    @classmethod
    def from_settings(cls, settings: CompletionSettings) -> "CompleterOptions":
        return cls(
            built_in_flag_name=settings.built_in_flag_name,
            resource_group_parameter_name=settings.resource_group_parameter_name,
            name_parameter_name=settings.name_parameter_name,
        )


def _default_client_factory(cli_ctx):
    from azext_templatespecs._client_factory import cf_template_specs

    return cf_template_specs(cli_ctx)


# -------------------------------------------------------------------- #
# Strategies
# -------------------------------------------------------------------- #


class CompletionStrategy(ABC):
    """One way of producing suggestions for a completion request."""

    @abstractmethod
    def complete(self, cmd, prefix: str, namespace) -> list[CompletionSuggestion]:
        """Return suggestions for *prefix* given the parsed arguments."""


class BuiltInStrategy(CompletionStrategy):
    """Suggest built-in names collected under a per-request deadline.

    ``lister_factory(cmd, namespace)`` returns the lister to enumerate,
    or ``None`` when the request lacks what the listing needs.
    """

    def __init__(
        self,
        lister_factory: Callable[[Any, Any], Lister | None],
        settings: CompletionSettings,
        clock: Clock = time.monotonic,
    ):
        self._lister_factory = lister_factory
        self._settings = settings
        self._clock = clock

    def complete(self, cmd, prefix: str, namespace) -> list[CompletionSuggestion]:
        deadline = Deadline.after(self._settings.timeout_seconds, self._clock)
        lister = self._lister_factory(cmd, namespace)
        if lister is None:
            return []

        result = enumerate_built_ins(lister, deadline, strict=self._settings.strict_mode)
        if result.timed_out:
            logger.debug("Built-in completion returned partial results (%d names)", len(result.names))
        names = filter_candidates(result.names, prefix, case_sensitive=self._settings.case_sensitive)
        return to_suggestions(names)


class DelegatedStrategy(CompletionStrategy):
    """Hand the request to a resource-name completer.

    ``completer(cmd, prefix, namespace)`` returns plain names, which are
    prefix-filtered and sorted like built-in names.
    """

    def __init__(self, completer: Callable[[Any, str, Any], list[str]], case_sensitive: bool = False):
        self._completer = completer
        self._case_sensitive = case_sensitive

    def complete(self, cmd, prefix: str, namespace) -> list[CompletionSuggestion]:
        names = self._completer(cmd, prefix, namespace)
        return to_suggestions(filter_candidates(names, prefix, case_sensitive=self._case_sensitive))


def select_strategy(
    namespace,
    options: CompleterOptions,
    built_in: CompletionStrategy,
    delegated: CompletionStrategy,
) -> CompletionStrategy:
    """Pick the built-in strategy when the built-in flag is set."""
    if getattr(namespace, options.built_in_flag_name, False):
        return built_in
    return delegated


# -------------------------------------------------------------------- #
# Completer
# -------------------------------------------------------------------- #


class TemplateSpecCompleter:
    """Completer wiring a built-in and a delegated strategy together."""

    def __init__(
        self,
        built_in: CompletionStrategy,
        delegated: CompletionStrategy,
        settings: CompletionSettings,
    ):
        self.built_in = built_in
        self.delegated = delegated
        self.settings = settings
        self.options = CompleterOptions.from_settings(settings)

    def suggestions(
        self,
        cmd,
        prefix: str,
        namespace,
        strategy: CompletionStrategy | None = None,
    ) -> list[CompletionSuggestion]:
        """Return suggestions; failures yield ``[]`` unless in strict mode.

        *strategy* pins the strategy for commands that only ever accept
        one kind of template spec.
        """
        if strategy is None:
            strategy = select_strategy(namespace, self.options, self.built_in, self.delegated)
        try:
            return strategy.complete(cmd, prefix or "", namespace)
        except Exception as exc:
            if self.settings.strict_mode:
                raise
            logger.debug("%s failed: %s", type(strategy).__name__, exc)
            return []

    def __call__(self, cmd, prefix: str, namespace, **kwargs) -> list[str]:
        return [s.value for s in self.suggestions(cmd, prefix, namespace)]


def _resource_group(namespace, options: CompleterOptions) -> str | None:
    return getattr(namespace, options.resource_group_parameter_name, None)


def template_spec_name_completer(
    settings: CompletionSettings,
    client_factory: ClientFactory | None = None,
    clock: Clock = time.monotonic,
) -> TemplateSpecCompleter:
    """Build the completer for template spec names."""
    options = CompleterOptions.from_settings(settings)
    client_factory = client_factory or _default_client_factory

    def built_in_lister(cmd, namespace):
        return built_in_template_spec_lister(client_factory(cmd.cli_ctx))

    def user_template_specs(cmd, prefix, namespace):
        client = client_factory(cmd.cli_ctx)
        resource_group = _resource_group(namespace, options)
        if resource_group:
            specs = client.template_specs.list_by_resource_group(resource_group)
        else:
            specs = client.template_specs.list_by_subscription()
        return [spec.name for spec in specs]

    return TemplateSpecCompleter(
        BuiltInStrategy(built_in_lister, settings, clock),
        DelegatedStrategy(user_template_specs, settings.case_sensitive),
        settings,
    )


def template_spec_version_completer(
    settings: CompletionSettings,
    client_factory: ClientFactory | None = None,
    clock: Clock = time.monotonic,
) -> TemplateSpecCompleter:
    """Build the completer for template spec versions.

    Versions hang off a template spec, so both strategies need the
    template spec name from the parsed arguments.
    """
    options = CompleterOptions.from_settings(settings)
    client_factory = client_factory or _default_client_factory

    def built_in_lister(cmd, namespace):
        name = getattr(namespace, options.name_parameter_name, None)
        if not name:
            return None
        return built_in_version_lister(client_factory(cmd.cli_ctx), name)

    def user_versions(cmd, prefix, namespace):
        resource_group = _resource_group(namespace, options)
        name = getattr(namespace, options.name_parameter_name, None)
        if not resource_group or not name:
            return []
        client = client_factory(cmd.cli_ctx)
        return [version.name for version in client.template_spec_versions.list(resource_group, name)]

    return TemplateSpecCompleter(
        BuiltInStrategy(built_in_lister, settings, clock),
        DelegatedStrategy(user_versions, settings.case_sensitive),
        settings,
    )


# -------------------------------------------------------------------- #
# Azure CLI entry points
# -------------------------------------------------------------------- #


def _load_settings_for_completion() -> CompletionSettings:
    from azext_templatespecs.config import load_settings

    try:
        return load_settings()
    except Exception as exc:
        logger.debug("Using default completion settings: %s", exc)
        return CompletionSettings()


def complete_template_spec_names(cmd, prefix, namespace, **kwargs):
    """``--name`` completer honouring the built-in flag."""
    return template_spec_name_completer(_load_settings_for_completion())(cmd, prefix, namespace)


def complete_template_spec_versions(cmd, prefix, namespace, **kwargs):
    """``--version`` completer honouring the built-in flag."""
    return template_spec_version_completer(_load_settings_for_completion())(cmd, prefix, namespace)


def complete_built_in_template_spec_names(cmd, prefix, namespace, **kwargs):
    """``--name`` completer for commands that only accept built-ins."""
    completer = template_spec_name_completer(_load_settings_for_completion())
    return [s.value for s in completer.suggestions(cmd, prefix, namespace, strategy=completer.built_in)]


def complete_built_in_template_spec_versions(cmd, prefix, namespace, **kwargs):
    """``--version`` completer for commands that only accept built-ins."""
    completer = template_spec_version_completer(_load_settings_for_completion())
    return [s.value for s in completer.suggestions(cmd, prefix, namespace, strategy=completer.built_in)]
