"""Target type-system formatters."""

from .base import LanguageFormatter
from .csharp import CSharpFormatter
from .typescript import TypeScriptFormatter

__all__ = ["LanguageFormatter", "CSharpFormatter", "TypeScriptFormatter"]
