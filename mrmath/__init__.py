"""MRmath public package.

Numerical building blocks for diffusion MRI model fitting.
The canonical import root is `mrmath`.
"""

from __future__ import annotations

from ._version import __version__

__all__ = ["__version__"]
