from prometheus_fastapi_instrumentator import Instrumentator

from .core.config import settings
from .core.logging import configure_logging
from . import app as base_app

configure_logging()
app = base_app
app.title = settings.APP_NAME

# Instrument at import time; Starlette refuses new middleware once the app has started.
instrumentator = Instrumentator(excluded_handlers=["/metrics", "/health"])
instrumentator.instrument(app).expose(app, include_in_schema=False)


def run() -> None:
    import uvicorn

    uvicorn.run("comrent.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
