"""Entry point for python -m buildhooks"""

from buildhooks.cli import app


def main() -> None:
    app()


if __name__ == "__main__":
    main()
