"""Exceptions raised by srcdocs when a run cannot continue."""

from __future__ import annotations


class SrcDocsError(RuntimeError):
    """Base class for fatal srcdocs errors."""


class ConfigError(SrcDocsError):
    """Raised when the configuration file or a comment syntax is invalid."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Config Error: {message}")


class TemplateError(SrcDocsError):
    """Raised when a template fails to compile or render."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Template parsing error {message}")


class ReservedTagError(SrcDocsError):
    """Raised when a comment block uses a tag name reserved for templates."""

    def __init__(self, tag: str, source: str | None = None) -> None:
        message = f"The tag `{tag}` is reserved."
        if source:
            message = f"{message} (found in {source})"
        super().__init__(message)
        self.tag = tag
        self.source = source


__all__ = ["ConfigError", "ReservedTagError", "SrcDocsError", "TemplateError"]
