# petbrain/__main__.py
"""Entry point for ``python -m petbrain``."""

from petbrain.cli import app

if __name__ == "__main__":
    app()
