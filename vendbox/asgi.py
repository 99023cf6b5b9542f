from __future__ import annotations

from vendbox.engine import build_app
from vendbox.logger import setup_logger

setup_logger()

app = build_app()
