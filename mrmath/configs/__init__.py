"""Packaged configuration templates.

This package ships `*.ini` line-search configuration templates.

Use `get_configs_dir()` to locate these resources on disk.
"""

from __future__ import annotations

from .paths import get_configs_dir, resolve_config_path

__all__ = [
    "get_configs_dir",
    "resolve_config_path",
]
