"""Allow ``python -m hone``."""

from hone.cli import app

app()
