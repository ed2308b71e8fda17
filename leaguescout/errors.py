"""Errors raised by the FACEIT source client and the reconciler."""

from __future__ import annotations

import requests


class FaceitError(RuntimeError):
    """Base class for FACEIT data errors."""


class FaceitApiError(FaceitError):
    """A FACEIT endpoint answered with a non-2xx status."""

    def __init__(self, status_code: int, url: str):
        super().__init__(f"FACEIT request failed ({status_code}): {url}")
        self.status_code = status_code
        self.url = url


class FaceitNotFound(FaceitApiError):
    """404 from a single-entity lookup."""


class FeedFetchError(FaceitError):
    """The championship match feed could not be loaded."""

    def __init__(self, championship_id: str, offset: int, cause: Exception):
        super().__init__(
            f"Failed to load championship matches for {championship_id} "
            f"at offset {offset}: {cause}"
        )
        self.championship_id = championship_id
        self.offset = offset
        self.cause = cause


# Failures a single lookup can end with; fan-out and fallback paths absorb these.
FETCH_ERRORS = (FaceitError, requests.RequestException, ValueError)
