"""Entry point for ``python -m fluentval``."""

from fluentval.cli import app

if __name__ == "__main__":
    app()
