"""Tests for azext_templatespecs.ui.console — literal message output."""

import io
from unittest.mock import patch

from rich.console import Console as RichConsole

from azext_templatespecs.ui.console import THEME, Console

# Exception text from the service can contain square brackets that rich
# would otherwise read as markup tags.
_BRACKETED = "Listing failed: bad token [/bold] near [red]"


def _buffered_console():
    c = Console()
    buffer = io.StringIO()
    c._console = RichConsole(file=buffer, theme=THEME, highlight=False, width=200)
    return c, buffer


class TestMarkupEscaping:

    def test_warning_escapes_message(self):
        c = Console()
        with patch.object(c._console, "print") as mock_print:
            c.print_warning(_BRACKETED)

        output = mock_print.call_args[0][0]
        assert output.startswith("[warning]![/warning] ")
        assert "\\[/bold]" in output

    def test_warning_renders_brackets_literally(self):
        c, buffer = _buffered_console()

        c.print_warning(_BRACKETED)

        assert buffer.getvalue().strip() == f"! {_BRACKETED}"

    def test_dim_renders_brackets_literally(self):
        c, buffer = _buffered_console()

        c.print_dim("names like [abc] kept")

        assert buffer.getvalue().strip() == "names like [abc] kept"

    def test_spinner_completion_line_renders_brackets_literally(self):
        c, buffer = _buffered_console()

        with c.spinner("Listing built-in versions of '[/x]'"):
            pass

        assert "Listing built-in versions of '[/x]' completed." in buffer.getvalue()
