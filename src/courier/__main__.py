"""Allow running the CLI with ``python -m courier``."""

from courier.cli import app

app()
