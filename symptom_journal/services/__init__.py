# Mark services as a package and expose key service modules for tests to monkeypatch.

from . import analysis as analysis  # noqa: F401
from . import gemini as gemini  # noqa: F401

__all__ = [
    "analysis",
    "gemini",
]
