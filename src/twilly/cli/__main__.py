"""Allow ``python -m twilly.cli``."""

from .app import app

if __name__ == "__main__":
    app()
