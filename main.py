from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from guidari.config import settings
from guidari.exceptions import setup_exception_handlers
from guidari.logging_config import logger, setup_logging
from guidari.middlewares import setup_middlewares
from guidari.routers import appointments, auth, dashboard, documents, finance, patients, professionals
from guidari.routers import settings as settings_router
from guidari.services.controller import ClinicController

VERSION = "1.0.0"


def create_app(controller: ClinicController | None = None) -> FastAPI:
    setup_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.controller = controller or ClinicController(settings)
        logger.info("Application starting", extra={"version": VERSION})
        await app.state.controller.startup()
        yield
        await app.state.controller.shutdown()
        logger.info("Application stopped")

    app = FastAPI(title="Guidari API", version=VERSION, lifespan=lifespan)

    setup_middlewares(app)
    setup_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(professionals.router)
    app.include_router(patients.router)
    app.include_router(documents.router)
    app.include_router(appointments.router)
    app.include_router(dashboard.router)
    app.include_router(finance.router)
    app.include_router(settings_router.router)

    @app.get("/")
    def root():
        return {"ok": True, "docs": "/docs"}

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("main:app", reload=True, port=8001)
