"""Entrypoint for `python -m ots_client`."""

from .cli import main


if __name__ == "__main__":
    main()
