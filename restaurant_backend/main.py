"""FastAPI ASGI application entrypoint."""

import uvicorn

from .core.app_factory import create_application

app = create_application()


def run() -> None:
    settings = app.state.settings
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()

__all__ = ("app", "run")
