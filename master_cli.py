"""Checkout CLI shim.

Installed MRmath uses the package-scoped entrypoint `mrmath.master_cli:main`.
This file remains for running from a git checkout.
"""

from __future__ import annotations

import sys

from mrmath.master_cli import main


if __name__ == "__main__":
    sys.exit(main())
