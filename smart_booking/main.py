import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from smart_booking.api.routes import router
from smart_booking.core.logging import configure_logging
from smart_booking.infrastructure.store.dev_backend_store import DevBackendError, DevBackendStore

logger = logging.getLogger(__name__)


def create_app(store: DevBackendStore | None = None) -> FastAPI:
    """Development backend serving the booking HTTP contract from memory."""
    app = FastAPI(title="Smart Booking Dev Backend", version="1.0.0")
    app.state.store = store or DevBackendStore()

    @app.exception_handler(DevBackendError)
    async def backend_error_handler(request: Request, exc: DevBackendError) -> JSONResponse:
        logger.info(
            "Request rejected",
            extra={"method": request.method, "path": request.url.path, "status": exc.status_code, "error": exc.message},
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "data": None, "message": exc.message},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"success": False, "data": None, "message": "Invalid request", "error": str(exc.errors())},
        )

    app.include_router(router)
    return app


configure_logging()

app = create_app()
