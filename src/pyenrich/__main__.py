"""Run the command line driver with ``python -m pyenrich``."""

from .driver import main as driver_main


def main() -> None:
    """Entry point for ``python -m pyenrich``."""
    driver_main()


if __name__ == "__main__":
    main()
