from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from journeyscope.api.routes import router as api_router
from journeyscope.core.config import get_settings
from journeyscope.core.logging import configure_logging
from journeyscope.services.errors import JourneyScopeError

LOGGER = logging.getLogger(__name__)

settings = get_settings()
configure_logging()

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.frontend_origins,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

app.include_router(api_router)


@app.exception_handler(JourneyScopeError)
async def unhandled_service_error(request: Request, exc: JourneyScopeError) -> JSONResponse:
    LOGGER.error('Unhandled %s on %s %s: %s', type(exc).__name__, request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={'detail': 'Internal error'})


@app.get('/health')
def health() -> dict[str, str]:
    return {'status': 'ok', 'app': settings.app_name, 'environment': settings.environment}
