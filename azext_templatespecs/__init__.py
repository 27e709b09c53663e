"""Azure CLI Extension: built-in aware completion for template specs."""

try:
    from azure.cli.core import AzCommandsLoader
except ImportError:
    # Azure CLI not installed: allow submodules (e.g. the completion
    # pipeline) to be imported standalone without the full CLI runtime.
    AzCommandsLoader = None  # type: ignore[assignment,misc]

if AzCommandsLoader is not None:
    from azext_templatespecs._help import helps  # type: ignore[attr-defined]  # noqa: F401

    class TemplateSpecsCommandsLoader(AzCommandsLoader):
        """Command loader for the templatespecs extension."""

        def __init__(self, cli_ctx=None):
            from azure.cli.core.commands import CliCommandType

            templatespecs_custom = CliCommandType(operations_tmpl="azext_templatespecs.custom#{}")
            super().__init__(cli_ctx=cli_ctx, custom_command_type=templatespecs_custom)

        def load_command_table(self, args):
            from azext_templatespecs.commands import load_command_table

            load_command_table(self, args)
            return self.command_table

        def load_arguments(self, command):
            from azext_templatespecs._params import load_arguments

            load_arguments(self, command)

    COMMAND_LOADER_CLS = TemplateSpecsCommandsLoader
