"""gitvault - manage several local Git repositories from one list.

The package wraps the ``git`` command line with bounded, non-interactive
process execution, a failure classifier, and small recovery flows for pull
and push.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
