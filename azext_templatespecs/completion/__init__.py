"""Built-in aware completion for template spec names and versions."""

from azext_templatespecs.completion.enumerator import (
    BuiltInsRemoteError,
    BuiltInsTimeoutError,
    Deadline,
    NamedItem,
    Page,
    ResultSet,
    enumerate_built_ins,
)
from azext_templatespecs.completion.filter import CompletionSuggestion, filter_candidates, to_suggestions

__all__ = [
    "BuiltInsRemoteError",
    "BuiltInsTimeoutError",
    "CompletionSuggestion",
    "Deadline",
    "NamedItem",
    "Page",
    "ResultSet",
    "enumerate_built_ins",
    "filter_candidates",
    "to_suggestions",
]
