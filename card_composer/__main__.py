"""
Run the service with uvicorn: ``python -m card_composer``.
"""

import uvicorn

from card_composer.core.config import Settings
from card_composer.main import create_app


def main():
    settings = Settings.from_env()
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
