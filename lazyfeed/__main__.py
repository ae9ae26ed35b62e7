"""Module entrypoint for ``python -m lazyfeed``.

All argument parsing and runtime setup happen in ``lazyfeed.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
