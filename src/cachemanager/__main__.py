"""Allow running as ``python -m cachemanager``."""

from cachemanager.cli import app

app(prog_name="cachemanager")
