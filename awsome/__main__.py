"""Module entrypoint for ``python -m awsome``.

Behaves exactly like the ``awsome`` console script.
"""

from .cli import main


if __name__ == "__main__":
    main()
