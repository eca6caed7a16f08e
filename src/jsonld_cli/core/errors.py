"""Exceptions raised by the CLI itself.

Errors coming from pyld (`JsonLdError`) are not wrapped; the CLI reports
both kinds through the same error renderer.
"""

from __future__ import annotations

from typing import Any


class JsonLdCliError(Exception):
    """Base error carrying a message and optional structured details."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class OptionError(JsonLdCliError):
    """Invalid or missing command line option."""


class LoaderError(JsonLdCliError):
    """A document could not be loaded or its loader is not allowed."""


class InputTypeError(JsonLdCliError):
    """Unknown or unsupported input data type, or unparsable input."""


class ValidationError(JsonLdCliError):
    """Safe mode found lossy processing."""
