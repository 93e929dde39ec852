"""Entrypoint for ``python -m hue_group_cli``."""

from .cli import main


if __name__ == "__main__":
    main()
