import logging
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi_utils.tasks import repeat_every
from starlette.exceptions import HTTPException as StarletteHTTPException
from axii.core.config import settings
from axii.api.v1.endpoints.auth import router as auth_router
from axii.api.v1.endpoints.devices import router as devices_router
from axii.api.v1.endpoints.users import router as users_router
from axii.db.session import get_db, init_models
from axii.tasks.devices import sweep_stale_devices

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.PROJECT_NAME)
api_version = settings.API_V1_STR

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(auth_router, prefix=f"{api_version}/auth", tags=["auth"])
app.include_router(devices_router, prefix=f"{api_version}/devices", tags=["devices"])
app.include_router(users_router, prefix=f"{api_version}/users", tags=["users"])


# O frontend só diferencia sucesso de mensagem de erro
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code >= 500:
        logger.error("HTTP %s em %s %s: %s", exc.status_code, request.method, request.url.path, exc.detail)
    else:
        logger.info("HTTP %s em %s %s: %s", exc.status_code, request.method, request.url.path, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Dados inválidos"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ())[1:])
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", message)
    return JSONResponse(
        status_code=422,
        content={"success": False, "message": message},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("Erro inesperado em %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": "Erro interno do servidor"},
    )


@repeat_every(seconds=max(settings.DEVICE_SWEEP_SECONDS, 1), logger=logger)
async def schedule_device_sweep():
    async for db in get_db():
        await sweep_stale_devices(db)


@app.on_event("startup")
async def startup():
    await init_models()
    logger.info("Startup concluído. Tabelas criadas.")

    if settings.DEVICE_SWEEP_SECONDS > 0:
        await schedule_device_sweep()
