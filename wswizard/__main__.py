"""Module entrypoint for ``python -m wswizard``.

All argument parsing and runtime setup happen in ``wswizard.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
