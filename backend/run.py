"""Start the API server.

Usage:
    python -m backend.run
"""
import uvicorn

from backend.core.config import load_settings
from backend.main import configure_logging, create_app


def main() -> None:
    settings = load_settings()
    configure_logging(settings)
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == '__main__':
    main()
