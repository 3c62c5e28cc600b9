"""Module entrypoint for ``python -m markview``.

All argument parsing and runtime setup happen in ``markview.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
