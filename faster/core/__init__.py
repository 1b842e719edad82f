"""
faster.core: types shared by the parser and the driver.

Modules:
  - diagnostics: Diagnostic record rendered by the CLI
  - span: best-effort source span attached to diagnostics
"""

from .diagnostics import Diagnostic, has_errors
from .span import Span

__all__ = ["Diagnostic", "Span", "has_errors"]
