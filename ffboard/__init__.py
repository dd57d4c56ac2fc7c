"""ffboard: read-only Sleeper league dashboard backend.

Re-exports key subpackages.
"""

from importlib import import_module as _imp

_SUBPACKAGES = ["api", "compute", "report", "cli"]

for _name in _SUBPACKAGES:
    _imp(f"ffboard.{_name}")

__all__ = list(_SUBPACKAGES)
