"""Run the DevGuard REST API."""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from devguard.api import create_app
from devguard.config import load_settings
from devguard.log import LOGGER, configure_logging
from devguard.service import build_service


def main() -> None:
    configure_logging()
    settings = load_settings()
    app = create_app(build_service(settings))
    LOGGER.info("Backend server running on port %d", settings.port)
    app.run(host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
