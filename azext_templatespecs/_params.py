"""CLI parameter definitions for the templatespecs extension."""

from azure.cli.core.commands.parameters import get_enum_type, get_three_state_flag, resource_group_name_type
from azure.cli.core.decorators import Completer

from azext_templatespecs.completion.completers import (
    complete_built_in_template_spec_names,
    complete_built_in_template_spec_versions,
    complete_template_spec_names,
    complete_template_spec_versions,
)


def load_arguments(self, _):
    """Register CLI parameters for all commands."""

    name_completer = Completer(complete_template_spec_names)
    version_completer = Completer(complete_template_spec_versions)
    built_in_name_completer = Completer(complete_built_in_template_spec_names)
    built_in_version_completer = Completer(complete_built_in_template_spec_versions)

    built_in_flag = {
        "options_list": ["--built-in"],
        "action": "store_true",
        "default": False,
        "help": "Use the tenant's built-in template specs instead of the ones in a resource group.",
    }

    # --- az ts resolve ---
    with self.argument_context("ts resolve") as c:
        c.argument(
            "name",
            options_list=["--name", "-n"],
            help="Template spec name.",
            completer=name_completer,
        )
        c.argument(
            "version",
            options_list=["--version", "-v"],
            help="Template spec version. Omit to return the template spec itself.",
            completer=version_completer,
        )
        c.argument("built_in", **built_in_flag)
        c.argument("resource_group_name", arg_type=resource_group_name_type, required=False)

    # --- listings: az ts built-in list / version list ---
    for scope in ("ts built-in list", "ts built-in version list"):
        with self.argument_context(scope) as c:
            c.argument("prefix", help="Only return names starting with this prefix.")
            c.argument(
                "timeout",
                type=float,
                help="Seconds to spend listing built-ins before returning partial results (default: 3).",
            )
            c.argument(
                "strict",
                arg_type=get_three_state_flag(),
                help="Fail instead of returning partial results when the listing times out or errors.",
            )

    # --- az ts built-in show / version * ---
    for scope in ("ts built-in show", "ts built-in version"):
        with self.argument_context(scope) as c:
            c.argument(
                "name",
                options_list=["--name", "-n"],
                help="Name of the built-in template spec.",
                completer=built_in_name_completer,
            )

    with self.argument_context("ts built-in version show") as c:
        c.argument(
            "version",
            options_list=["--version", "-v"],
            help="Version of the built-in template spec.",
            completer=built_in_version_completer,
        )

    # --- az ts completion run ---
    with self.argument_context("ts completion run") as c:
        c.argument(
            "target",
            arg_type=get_enum_type(["name", "version"]),
            help="Which argument to complete.",
            default="name",
        )
        c.argument("prefix", help="Text typed so far.")
        c.argument("built_in", **built_in_flag)
        c.argument(
            "name",
            options_list=["--name", "-n"],
            help="Template spec name (required when completing versions).",
            completer=name_completer,
        )
        c.argument("resource_group_name", arg_type=resource_group_name_type, required=False)
        c.argument("timeout", type=float, help="Completion deadline in seconds.")
        c.argument(
            "strict",
            arg_type=get_three_state_flag(),
            help="Raise timeouts and service errors instead of returning partial results.",
        )

    # --- az ts completion config set ---
    with self.argument_context("ts completion config set") as c:
        c.argument(
            "key",
            help="Setting to change: timeout_seconds, strict_mode, case_sensitive, "
            "built_in_flag_name, resource_group_parameter_name or name_parameter_name.",
        )
        c.argument("value", help="New value for the setting.")
