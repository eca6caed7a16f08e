"""Loader kinds and the secondary-resource allow list.

The primary input of a command may come from any loader. Everything loaded
afterwards is restricted to the allow list, which defaults to HTTP and
HTTPS only.
"""

from __future__ import annotations

from enum import Enum

from jsonld_cli.core.errors import OptionError


class LoaderKind(str, Enum):
    """Where a document is read from."""

    STDIN = "stdin"
    FILE = "file"
    HTTP = "http"
    HTTPS = "https"

    @classmethod
    def for_url(cls, url: str) -> "LoaderKind":
        """Classify a URL, path or `-`.

        Unknown URL schemes are reported by the loader, not here; anything
        without a recognised prefix is treated as a local path.
        """

        lowered = url.lower()
        if url == "-" or lowered.startswith("stdin:"):
            return cls.STDIN
        if lowered.startswith("http://"):
            return cls.HTTP
        if lowered.startswith("https://"):
            return cls.HTTPS
        return cls.FILE


ALLOW_ALL: frozenset[LoaderKind] = frozenset(LoaderKind)
ALLOW_DEFAULT: frozenset[LoaderKind] = frozenset({LoaderKind.HTTP, LoaderKind.HTTPS})
ALLOW_NONE: frozenset[LoaderKind] = frozenset()


def parse_allow(value: str | None) -> frozenset[LoaderKind]:
    """Parse a `-a/--allow` value such as `file,https` or `all`.

    `all` takes precedence over `none`; both take precedence over the
    individual kinds listed with them. `None` means the default allow list.
    """

    if value is None:
        return ALLOW_DEFAULT

    tokens = [token.strip().lower() for token in value.split(",")]
    tokens = [token for token in tokens if token]
    if "all" in tokens:
        return ALLOW_ALL
    if "none" in tokens:
        return ALLOW_NONE

    kinds: set[LoaderKind] = set()
    for token in tokens:
        try:
            kinds.add(LoaderKind(token))
        except ValueError:
            raise OptionError(
                f"Unknown loader in allow list: {token}",
                {"allow": value, "valid": ["none", "all", *(k.value for k in LoaderKind)]},
            ) from None
    return frozenset(kinds)
