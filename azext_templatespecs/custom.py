"""Custom command implementations for az ts built-in.

These functions are the entry points called by the Azure CLI framework.
Each one maps to a registered command in commands.py.
"""

import argparse
import logging
import time
from dataclasses import asdict, replace

from knack.util import CLIError

from azext_templatespecs.completion.enumerator import Deadline, ResultSet, enumerate_built_ins
from azext_templatespecs.completion.filter import filter_candidates
from azext_templatespecs.completion.listers import built_in_template_spec_lister, built_in_version_lister
from azext_templatespecs.config import CompletionSettings, TemplateSpecsConfig
from azext_templatespecs.telemetry import track, track_enumeration

logger = logging.getLogger(__name__)


# ======================================================================
# Helpers
# ======================================================================

def _get_console():
    from azext_templatespecs.ui.console import console

    return console


def _load_settings(timeout=None, strict=None) -> CompletionSettings:
    """Load user settings and apply per-command overrides."""
    config = TemplateSpecsConfig()
    config.load()
    settings = config.to_settings()

    overrides = {}
    if timeout is not None:
        overrides["timeout_seconds"] = TemplateSpecsConfig.coerce_value("completion.timeout_seconds", timeout)
    if strict is not None:
        overrides["strict_mode"] = bool(strict)
    return replace(settings, **overrides) if overrides else settings


def _client(cmd):
    from azext_templatespecs._client_factory import cf_template_specs

    return cf_template_specs(cmd.cli_ctx)


def _enumerate(listing: str, lister, settings: CompletionSettings) -> ResultSet:
    """Run a bounded listing, reporting partial results on the console."""
    console = _get_console()
    start = time.monotonic()
    deadline = Deadline.after(settings.timeout_seconds)

    with console.spinner(f"Listing {listing}"):
        result = enumerate_built_ins(lister, deadline, strict=settings.strict_mode)

    track_enumeration(listing, result, time.monotonic() - start)

    if result.timed_out:
        if result.faulted:
            console.print_warning(f"Listing {listing} failed: {result.error}")
        else:
            console.print_warning(f"Listing {listing} did not finish within {settings.timeout_seconds:g}s.")
        console.print_dim(
            f"Showing the {len(result.names)} names collected so far. Use --timeout to allow more time."
        )
    return result


# ======================================================================
# Built-in template specs
# ======================================================================

@track("ts built-in list")
def ts_built_in_list(cmd, prefix=None, timeout=None, strict=None):
    """List built-in template spec names."""
    settings = _load_settings(timeout, strict)
    result = _enumerate("built-in template specs", built_in_template_spec_lister(_client(cmd)), settings)
    return filter_candidates(result.names, prefix, case_sensitive=settings.case_sensitive)


@track("ts built-in show")
def ts_built_in_show(cmd, name):
    """Show a built-in template spec."""
    return _client(cmd).template_specs.get_built_in(template_spec_name=name)


@track("ts built-in version list")
def ts_built_in_version_list(cmd, name, prefix=None, timeout=None, strict=None):
    """List the versions of a built-in template spec."""
    settings = _load_settings(timeout, strict)
    result = _enumerate(f"versions of built-in '{name}'", built_in_version_lister(_client(cmd), name), settings)
    return filter_candidates(result.names, prefix, case_sensitive=settings.case_sensitive)


@track("ts built-in version show")
def ts_built_in_version_show(cmd, name, version):
    """Show one version of a built-in template spec."""
    return _client(cmd).template_spec_versions.get_built_in(template_spec_name=name, template_spec_version=version)


@track("ts resolve")
def ts_resolve(cmd, name, version=None, built_in=False, resource_group_name=None):
    """Look up a template spec (or one of its versions) by name.

    With ``--built-in`` the tenant's built-in catalog is searched,
    otherwise the template spec must live in ``--resource-group``.
    """
    client = _client(cmd)

    if built_in:
        if resource_group_name:
            raise CLIError("--resource-group cannot be combined with --built-in.")
        if version:
            return client.template_spec_versions.get_built_in(template_spec_name=name, template_spec_version=version)
        return client.template_specs.get_built_in(template_spec_name=name)

    if not resource_group_name:
        raise CLIError("--resource-group is required unless --built-in is specified.")
    if version:
        return client.template_spec_versions.get(resource_group_name, name, version)
    return client.template_specs.get(resource_group_name, name)


# ======================================================================
# Completion
# ======================================================================

@track("ts completion run")
def ts_completion_run(
    cmd,
    target="name",
    prefix=None,
    built_in=False,
    name=None,
    resource_group_name=None,
    timeout=None,
    strict=None,
):
    """Run the completion pipeline as the shell would and return the suggestions."""
    from azext_templatespecs.completion.completers import (
        template_spec_name_completer,
        template_spec_version_completer,
    )

    settings = _load_settings(timeout, strict)
    namespace = argparse.Namespace(
        **{
            settings.built_in_flag_name: built_in,
            settings.name_parameter_name: name,
            settings.resource_group_parameter_name: resource_group_name,
        }
    )

    if target == "version":
        completer = template_spec_version_completer(settings)
    elif target == "name":
        completer = template_spec_name_completer(settings)
    else:
        raise CLIError(f"Unknown completion target: '{target}'. Use 'name' or 'version'.")

    return [s.to_dict() for s in completer.suggestions(cmd, prefix or "", namespace)]


@track("ts completion config show")
def ts_completion_config_show(cmd):
    """Show the effective completion settings."""
    config = TemplateSpecsConfig()
    config.load()
    return {"path": str(config.config_path), **asdict(config.to_settings())}


@track("ts completion config set")
def ts_completion_config_set(cmd, key, value):
    """Set a completion setting, e.g. ``strict_mode`` or ``completion.timeout_seconds``."""
    if not key.startswith("completion."):
        key = f"completion.{key}"
    config = TemplateSpecsConfig()
    config.load(apply_env=False)
    config.set(key, value)
    logger.info("Set %s in %s", key, config.config_path)
    return {"key": key, "value": config.get(key)}
