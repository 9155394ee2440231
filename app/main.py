from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config.settings import CORS_ORIGINS, CORS_ALLOW_ALL, BASE_URL, ENABLE_DOCS
from app.core.exception_handlers import (
    validation_exception_handler,
    http_exception_handler,
    general_exception_handler,
)
from app.utils.logger import logger
from app.utils.prometheus_metrics import PrometheusMiddleware

# Models registrados no metadata antes de qualquer query / create_all
import app.api.entregas.models  # noqa: F401

from app.api.entregas.router.router import api_entregas
from app.api.monitoring.router import router_public as monitoring_router_public

# Rotas sem bearer no Swagger
PUBLIC_PATHS = {"/", "/health", "/api/monitoring/metrics"}

app = FastAPI(
    title="API de Entregas",
    version="1.0.0",
    description=(
        "Zonas de entrega desenhadas no mapa, preço por zona e depósito, "
        "fila de despacho e presença dos entregadores."
    ),
    docs_url=("/swagger" if ENABLE_DOCS else None),
    redoc_url=("/redoc" if ENABLE_DOCS else None),
    openapi_url=("/openapi.json" if ENABLE_DOCS else None),
    servers=[{"url": BASE_URL, "description": "Base URL do ambiente"}] if BASE_URL else None,
    redirect_slashes=False,
)

app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)


def _configurar_cors(application: FastAPI):
    """
    CORS_ALLOW_ALL libera qualquer origem sem credenciais. Sem a flag, usa
    CORS_ORIGINS; credenciais só quando a lista de origens é explícita.
    """
    if CORS_ALLOW_ALL or not CORS_ORIGINS:
        origens, credenciais = ["*"], False
    else:
        origens, credenciais = CORS_ORIGINS, True
    application.add_middleware(
        CORSMiddleware,
        allow_origins=origens,
        allow_credentials=credenciais,
        allow_methods=["*"],
        allow_headers=["*"],
    )


# Ordem reversa: CORS (último adicionado) roda antes das métricas
app.add_middleware(PrometheusMiddleware)
_configurar_cors(app)


@app.on_event("startup")
async def startup():
    from app.database.init_db import inicializar_banco

    logger.info("[Startup] Preparando banco de entregas...")
    inicializar_banco()
    logger.info("[Startup] API de entregas pronta.")


@app.on_event("shutdown")
async def shutdown():
    logger.info("[Shutdown] API de entregas encerrada.")


@app.get("/")
async def root():
    return {"status": "ok", "message": "API de entregas no ar"}


@app.get("/health")
async def health():
    return {"status": "healthy"}


app.include_router(monitoring_router_public)
app.include_router(api_entregas)


def custom_openapi():
    """Bearer/JWT global no Swagger, exceto em PUBLIC_PATHS."""
    if app.openapi_schema:
        return app.openapi_schema
    schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
        servers=app.servers,
    )

    components = schema.setdefault("components", {})
    components.setdefault("securitySchemes", {})["bearerAuth"] = {
        "type": "http",
        "scheme": "bearer",
        "bearerFormat": "JWT",
    }
    schema["security"] = [{"bearerAuth": []}]

    for path, methods in schema.get("paths", {}).items():
        if path in PUBLIC_PATHS:
            for operacao in methods.values():
                operacao["security"] = []

    app.openapi_schema = schema
    return app.openapi_schema


app.openapi = custom_openapi
