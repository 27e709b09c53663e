"""Command table registration for the templatespecs extension."""


def load_command_table(self, _):
    """Register all template spec commands."""

    with self.command_group("ts", is_preview=True) as g:
        g.custom_command("resolve", "ts_resolve")

    with self.command_group("ts built-in", is_preview=True) as g:
        g.custom_command("list", "ts_built_in_list")
        g.custom_show_command("show", "ts_built_in_show")

    with self.command_group("ts built-in version", is_preview=True) as g:
        g.custom_command("list", "ts_built_in_version_list")
        g.custom_show_command("show", "ts_built_in_version_show")

    with self.command_group("ts completion", is_preview=True) as g:
        g.custom_command("run", "ts_completion_run")

    with self.command_group("ts completion config", is_preview=True) as g:
        g.custom_show_command("show", "ts_completion_config_show")
        g.custom_command("set", "ts_completion_config_set")
