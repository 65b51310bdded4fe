"""Module wrapper so running ``python -m rawdicomatic.cli`` matches the console script."""

from rawdicomatic.cli import main  # Re-exported Click command-group


if __name__ == "__main__":  # pragma: no cover
    main()
