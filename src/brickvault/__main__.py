"""Main entry point for the brickvault package."""

from brickvault.cli import app


def main():
    """Run the command-line interface."""
    app()


if __name__ == "__main__":
    main()
