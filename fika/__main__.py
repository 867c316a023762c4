"""Module entrypoint for ``python -m fika``."""

from .cli import main


if __name__ == "__main__":
    main()
