"""
YAML configuration loader.

Search precedence (first match wins)
1. An explicit path argument (``--config`` on the CLI).
2. The file named by ``$RAWDICOMATIC_CONFIG``.
3. The packaged default shipped inside the wheel.

All resolution logic is concentrated here so the rest of *rawdicomatic*
treats configuration as an already-validated object.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import yaml
from importlib.resources import as_file, files

from .schema import ConfigSchema

_ENV_VAR = "RAWDICOMATIC_CONFIG"

# --------------------------------------------------------------------------- #
# Wheel-internal fallback (works even from a zipped wheel)                    #
# --------------------------------------------------------------------------- #
try:
    _DEFAULT_CONFIG = files("rawdicomatic.resources") / "default_config.yaml"
except ModuleNotFoundError:
    _DEFAULT_CONFIG = Path(__file__).resolve().parent.parent / "resources" / "default_config.yaml"


def _load_yaml(path: Path) -> dict:
    """Read a YAML file.

    Args:
        path: Location of the YAML document.

    Returns:
        Dictionary parsed from the file, or an empty dict if the file is empty.
    """
    return yaml.safe_load(path.read_text()) or {}


def _resolve_yaml(explicit: Optional[Path]) -> Path:
    """Resolve the configuration path according to the documented precedence.

    Args:
        explicit: Path supplied by the caller (may be ``None``).

    Returns:
        Path to the YAML that should be loaded.

    Raises:
        RuntimeError: When an explicitly requested file does not exist.
    """
    if explicit is not None:
        if not explicit.exists():
            raise RuntimeError(f"Configuration file not found: {explicit}")
        return explicit

    env = os.environ.get(_ENV_VAR)
    if env:
        env_path = Path(env).expanduser().resolve()
        if not env_path.exists():
            raise RuntimeError(f"${_ENV_VAR} points to a missing file: {env_path}")
        return env_path

    with as_file(_DEFAULT_CONFIG) as p:
        return p


def load_config(*, config_path: Optional[str | Path] = None) -> ConfigSchema:
    """Return a fully validated :class:`ConfigSchema`.

    Args:
        config_path: Explicit path to a YAML override. ``None`` triggers the
            search sequence described in the module doc-string.

    Returns:
        A :class:`ConfigSchema` object ready for downstream use.

    Raises:
        RuntimeError: When the file is missing or fails Pydantic validation.
    """
    explicit = Path(config_path).expanduser().resolve() if config_path else None
    path = _resolve_yaml(explicit)

    try:
        return ConfigSchema(**_load_yaml(path))
    except Exception as exc:  # pydantic.ValidationError or YAML issues
        raise RuntimeError(f"Invalid configuration – {exc}") from exc
