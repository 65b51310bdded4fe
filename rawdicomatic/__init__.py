"""
rawdicomatic package initialisation.

The module performs two small tasks:

1. **Expose the version string**
   ``rawdicomatic.__version__`` is resolved at import-time from the installed
   distribution metadata so that the CLI banner, log files and tests all
   report the same value.

2. **Re-export the public YAML loader**
   :func:`rawdicomatic.config.load_config` is available at the top level so
   call-sites can simply do::

       from rawdicomatic import load_config

Module attributes
-----------------
__version__ : str
    Semantic version derived from the installed wheel.
load_config : Callable
    Shortcut to :pyfunc:`rawdicomatic.config.load_config`.
"""

from importlib.metadata import PackageNotFoundError, version

# --------------------------------------------------------------------------- #
# Version resolution
# --------------------------------------------------------------------------- #
try:
    __version__: str = version("rawdicomatic")
except PackageNotFoundError:
    # Source tree without an installed wheel.
    __version__ = "0.0.0"

# --------------------------------------------------------------------------- #
# Public re-exports
# --------------------------------------------------------------------------- #
from .config import load_config  # noqa: E402 – deliberate late import

__all__: list[str] = ["load_config", "__version__"]
