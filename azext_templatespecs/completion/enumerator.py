"""Bounded-time enumeration of built-in names from a paged listing.

The enumerator walks a paged listing (first page, then one page per
continuation token) under a single wall-clock deadline.  When the
deadline runs out it returns whatever has been collected so far and
flags the result as timed out, so completion never hangs the shell.

The budget is cooperative: an in-flight remote call cannot be
interrupted, so an overrun is detected once the call returns and the
late page is discarded.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Protocol, Sequence

from knack.util import CLIError

logger = logging.getLogger(__name__)

Clock = Callable[[], float]

_DEFAULT_LISTING = "built-in template specs"


# -------------------------------------------------------------------- #
# Data model
# -------------------------------------------------------------------- #


@dataclass(frozen=True)
class NamedItem:
    """A single item returned by a listing."""

    name: str


@dataclass(frozen=True)
class Page:
    """One page of a listing.

    A non-empty ``continuation_token`` means more data exists.
    """

    items: Sequence[NamedItem] = ()
    continuation_token: str | None = None

    @property
    def has_more(self) -> bool:
        return bool(self.continuation_token)


@dataclass
class ResultSet:
    """Names collected by an enumeration.

    When ``timed_out`` is set, ``names`` may be a strict prefix of the
    full listing.  ``error`` holds the remote exception that cut the
    enumeration short, if any.
    """

    names: list[str] = field(default_factory=list)
    timed_out: bool = False
    error: BaseException | None = None

    @property
    def faulted(self) -> bool:
        return self.error is not None


class Deadline:
    """Absolute point in time computed once per enumeration."""

    def __init__(self, expires_at: float, clock: Clock = time.monotonic):
        self.expires_at = expires_at
        self._clock = clock

    @classmethod
    def after(cls, seconds: float, clock: Clock = time.monotonic) -> "Deadline":
        return cls(clock() + seconds, clock)

    def remaining(self) -> float:
        return self.expires_at - self._clock()

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0

    def __repr__(self) -> str:
        return f"Deadline(remaining={self.remaining():.3f}s)"


class Lister(Protocol):
    """Capability consumed by :func:`enumerate_built_ins`.

    ``description`` names the listing in error messages, e.g.
    "built-in versions of 'WebApp'".
    """

    description: str

    def fetch_first_page(self) -> Page: ...

    def fetch_next_page(self, continuation_token: str) -> Page: ...


# -------------------------------------------------------------------- #
# Errors
# -------------------------------------------------------------------- #


class BuiltInsTimeoutError(CLIError):
    """Raised in strict mode when the built-ins listing overran its deadline."""

    def __init__(self, collected: int, listing: str = _DEFAULT_LISTING):
        super().__init__(f"Listing {listing} timed out ({collected} names collected before the deadline).")
        self.collected = collected
        self.listing = listing


class BuiltInsRemoteError(CLIError):
    """Raised in strict mode when the listing service returned an error."""


# -------------------------------------------------------------------- #
# Enumeration
# -------------------------------------------------------------------- #


class _FetchTimedOut(Exception):
    pass


def _bounded_fetch(fetch: Callable[[], Page], deadline: Deadline) -> Page:
    """Run *fetch* and verify it returned before *deadline*.

    Raises ``_FetchTimedOut`` if the budget was already spent or the
    call overran it.  Exceptions from *fetch* propagate.
    """
    if deadline.expired:
        raise _FetchTimedOut()
    budget = deadline.remaining()

    page = fetch()

    if deadline.remaining() < 0:
        logger.debug("Page fetch overran the remaining %.3fs budget", budget)
        raise _FetchTimedOut()
    return page


def enumerate_built_ins(lister: Lister, deadline: Deadline, *, strict: bool = False) -> ResultSet:
    """Collect item names from *lister* until exhausted or *deadline* passes.

    Args:
        lister: Paged listing capability.
        deadline: Absolute deadline shared by every page fetch.
        strict: Escalate timeouts and remote faults instead of
            returning a partial result.

    Returns:
        ResultSet with names in the order the service returned them.

    Raises:
        BuiltInsTimeoutError: strict mode only, on timeout.
        BuiltInsRemoteError: strict mode only, when the lister raised.
    """
    result = ResultSet()
    token: str | None = None
    first = True

    while first or token:
        try:
            if first:
                page = _bounded_fetch(lister.fetch_first_page, deadline)
            else:
                page = _bounded_fetch(lambda: lister.fetch_next_page(token), deadline)
        except _FetchTimedOut:
            result.timed_out = True
            break
        except Exception as exc:  # pylint: disable=broad-except
            logger.debug("Built-ins listing failed: %s", exc)
            result.timed_out = True
            result.error = exc
            break

        result.names.extend(item.name for item in page.items)
        logger.debug(
            "Fetched built-ins page: %d items (total %d, more=%s)",
            len(page.items), len(result.names), page.has_more,
        )
        token = page.continuation_token
        first = False

    if strict and result.timed_out:
        listing = lister.description or _DEFAULT_LISTING
        if result.error is not None:
            raise BuiltInsRemoteError(f"Listing {listing} failed: {result.error}") from result.error
        raise BuiltInsTimeoutError(len(result.names), listing)

    return result
