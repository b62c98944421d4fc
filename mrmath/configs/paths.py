from __future__ import annotations

from pathlib import Path


def get_configs_dir() -> Path:
    """Return the on-disk directory containing shipped config templates.

    Works for editable installs and installed wheels.
    """

    try:
        import importlib.resources as resources

        return Path(resources.files("mrmath.configs"))
    except (ImportError, AttributeError, TypeError):
        # Fallback: relative to this file
        return Path(__file__).resolve().parent


def resolve_config_path(raw: str) -> str:
    """Resolve a config path that may name a shipped template.

    If `raw` exists on disk, it is returned unchanged.
    Otherwise a bare filename (with or without the `.ini` suffix) is looked up
    among the packaged templates. Unresolvable paths are returned as given.
    """

    if not raw:
        return raw

    if Path(raw).exists():
        return raw

    name = Path(raw).name
    candidates = [get_configs_dir() / name]
    if not name.endswith('.ini'):
        candidates.append(get_configs_dir() / f"{name}.ini")

    for candidate in candidates:
        if candidate.exists():
            return str(candidate)

    return raw
