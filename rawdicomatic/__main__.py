"""
Module entry-point that makes the package runnable with

    python -m rawdicomatic
    python -m rawdicomatic.cli

The behaviour is identical to the *rawdicomatic-cli* console script because
the Click **group** object imported below performs all CLI dispatching.
"""

from rawdicomatic.cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
