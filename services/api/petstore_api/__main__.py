"""Run the pet store API with uvicorn: `python -m petstore_api`."""

import uvicorn

from .main import create_app
from .settings import get_settings


def main():
    """Entrypoint for the API container.

    Returns:
        None
    """
    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
