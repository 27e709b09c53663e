"""Telemetry collection via Application Insights (direct HTTP ingestion).

Sends lightweight usage events so the team can see how often built-in
listings run, how many names they return and how often they hit the
completion deadline.

Design principles:
* **Honour Azure CLI telemetry** — ``AZURE_CORE_COLLECT_TELEMETRY`` and the
  ``[core] disable_telemetry`` / ``collect_telemetry`` keys of the az config
  file are respected.  When neither is set, telemetry is enabled.
* **Graceful degradation** — a missing connection string, an unreachable
  endpoint or any other error silently skips the event.
* **Connection string priority** — the ``APPINSIGHTS_CONNECTION_STRING``
  environment variable, then ``_BUILTIN_CONNECTION_STRING``.
"""

import configparser
import json
import logging
import os
from datetime import datetime, timezone
from functools import wraps

logger = logging.getLogger(__name__)

# Injected at build time by the release pipeline.
_BUILTIN_CONNECTION_STRING = ""

_EXTENSION_NAME = "templatespecs"

_ingestion_endpoint: str | None = None
_instrumentation_key: str | None = None
_enabled: bool | None = None


def _is_cli_telemetry_enabled() -> bool:
    """Return *True* if the user has not disabled Azure CLI telemetry."""
    try:
        env_val = os.environ.get("AZURE_CORE_COLLECT_TELEMETRY")
        if env_val is not None:
            return env_val.lower() not in ("no", "false", "0", "off")

        from azext_templatespecs.config import _get_config_dir

        config_path = _get_config_dir() / "config"
        if config_path.exists():
            parser = configparser.ConfigParser()
            parser.read(config_path)
            if parser.has_option("core", "disable_telemetry"):
                return not parser.getboolean("core", "disable_telemetry")
            if parser.has_option("core", "collect_telemetry"):
                return parser.getboolean("core", "collect_telemetry")

        return True
    except Exception:
        return True


def _get_connection_string() -> str:
    return os.environ.get("APPINSIGHTS_CONNECTION_STRING", "") or _BUILTIN_CONNECTION_STRING


def is_enabled() -> bool:
    """Return *True* when telemetry can and should be sent (cached per process)."""
    global _enabled
    if _enabled is not None:
        return _enabled
    try:
        _enabled = _is_cli_telemetry_enabled() and bool(_get_connection_string())
    except Exception:
        _enabled = False
    return _enabled


def reset() -> None:
    """Reset cached state — useful for tests."""
    global _enabled, _ingestion_endpoint, _instrumentation_key
    _enabled = None
    _ingestion_endpoint = None
    _instrumentation_key = None


def _parse_connection_string(cs: str) -> tuple[str, str]:
    """Parse an App Insights connection string into ``(endpoint, ikey)``."""
    if not cs:
        return "", ""
    parts = dict(p.split("=", 1) for p in cs.split(";") if "=" in p)
    ikey = parts.get("InstrumentationKey", "")
    endpoint = parts.get("IngestionEndpoint", "").rstrip("/")
    if ikey and endpoint:
        return endpoint + "/v2/track", ikey
    return "", ""


def _get_ingestion_config() -> tuple[str, str]:
    global _ingestion_endpoint, _instrumentation_key
    if _ingestion_endpoint is None:
        _ingestion_endpoint, _instrumentation_key = _parse_connection_string(_get_connection_string())
    return _ingestion_endpoint, _instrumentation_key or ""


def _get_extension_version() -> str:
    try:
        from importlib.metadata import version as pkg_version

        return pkg_version(_EXTENSION_NAME)
    except Exception:
        return "unknown"


def _send_envelope(envelope: dict, endpoint: str) -> bool:
    """POST a single envelope to the ingestion endpoint.  Never raises."""
    try:
        import requests  # lazy: not imported when telemetry is off

        resp = requests.post(
            endpoint,
            data=json.dumps([envelope]),
            headers={"Content-Type": "application/json"},
            timeout=5,
        )
        return resp.status_code == 200
    except Exception:
        return False


def _emit(event_name: str, properties: dict[str, str]) -> None:
    if not is_enabled():
        return
    endpoint, ikey = _get_ingestion_config()
    if not endpoint or not ikey:
        return
    try:
        now = datetime.now(timezone.utc).isoformat()
        envelope = {
            "name": "Microsoft.ApplicationInsights.Event",
            "time": now,
            "iKey": ikey,
            "tags": {
                "ai.cloud.role": "az-templatespecs",
                "ai.internal.sdkVersion": "py-direct:1.0.0",
            },
            "data": {
                "baseType": "EventData",
                "baseData": {
                    "ver": 2,
                    "name": event_name,
                    "properties": {
                        **properties,
                        "extensionVersion": _get_extension_version(),
                        "timestamp": now,
                    },
                },
            },
        }
        _send_envelope(envelope, endpoint)
    except Exception:
        logger.debug("Telemetry event '%s' dropped", event_name)


# ---------------------------------------------------------------
# Public API
# ---------------------------------------------------------------


def track_command(command_name: str, *, success: bool = True, error: str = "") -> None:
    """Send a ``cli_command_executed`` event."""
    properties = {"commandName": command_name, "success": str(success).lower()}
    if error:
        properties["error"] = error[:1024]
    _emit("cli_command_executed", properties)


def track_enumeration(listing: str, result, duration_seconds: float) -> None:
    """Send a ``built_ins_enumerated`` event for one bounded listing.

    *result* is the :class:`ResultSet` returned by the enumerator.
    """
    _emit(
        "built_ins_enumerated",
        {
            "listing": listing,
            "count": str(len(result.names)),
            "timedOut": str(result.timed_out).lower(),
            "faulted": str(result.faulted).lower(),
            "durationMs": str(int(duration_seconds * 1000)),
        },
    )


def track(command_name: str):
    """Decorator that records command-execution telemetry.

    The decorated function must take ``cmd`` as its first positional
    argument (standard Azure CLI convention).
    """

    def decorator(func):
        @wraps(func)
        def wrapper(cmd, *args, **kwargs):
            success = True
            error_msg = ""
            try:
                return func(cmd, *args, **kwargs)
            except Exception as exc:
                success = False
                error_msg = f"{type(exc).__name__}: {exc}"
                raise
            finally:
                track_command(command_name, success=success, error=error_msg)

        return wrapper

    return decorator
