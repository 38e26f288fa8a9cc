"""
Exceptions for the graph code generator.

Graph content problems never raise: the validator reports them and the
generator degrades to comments and fallbacks. These exceptions cover misuse of
the library itself (bad language configurations, registry mistakes, malformed
serialized graphs).
"""

from typing import Optional, Any, Dict


class GraphCodegenError(Exception):
    """Base exception for all graph code generator errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class LanguageConfigError(GraphCodegenError):
    """Raised when a language configuration is missing required templates."""

    def __init__(self, message: str, language: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.language = language


class RegistryError(GraphCodegenError):
    """Raised on duplicate registrations or lookups of unknown node kinds."""

    def __init__(self, message: str, kind: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.kind = kind


class GraphFormatError(GraphCodegenError):
    """Raised when a serialized graph cannot be loaded."""
    pass
