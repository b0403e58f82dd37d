"""Run the HTTP API: ``python -m usercore``."""

import uvicorn

from usercore.api.http.app import create_app
from usercore.runtime.settings import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
