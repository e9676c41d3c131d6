import logging
from contextlib import asynccontextmanager
from typing import Optional
import uvicorn
from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from agenda.core.config import Settings, get_settings
from agenda.core.logging import setup_logging
from agenda.db.session import Database
from agenda.api.contatos import router as contatos_router

logger = logging.getLogger(__name__)

ROUTES = (
    ("POST", "/contacts", "Cria um novo contato"),
    ("GET", "/contacts", "Lista todos os contatos"),
    ("GET", "/contacts/:id", "Obtém um contato específico"),
    ("PUT", "/contacts/:id", "Atualiza um contato existente"),
    ("DELETE", "/contacts/:id", "Deleta um contato"),
)


def _log_routes(settings: Settings) -> None:
    logger.info("Servidor backend rodando em http://127.0.0.1:%s", settings.PORT)
    logger.info("API Endpoints:")
    for method, path, description in ROUTES:
        logger.info("  %-6s %-14s - %s", method, path, description)


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """Create and configure FastAPI application."""
    settings = settings or get_settings()
    setup_logging(level=settings.LOG_LEVEL, log_file=settings.LOG_FILE)
    db = database or Database(str(settings.DB_URL))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await db.create_all()
        _log_routes(settings)
        try:
            yield
        finally:
            await db.dispose()

    app = FastAPI(
        title=settings.APP_NAME,
        description="""
        ## Agenda de Contatos

        CRUD de contatos (nome, sobrenome, data de nascimento, telefone e
        indicador de família). O telefone é único entre todos os contatos.

        Todas as respostas de erro têm o formato `{"error": "<mensagem>"}`.
        """,
        version="1.0.0",
        openapi_tags=[
            {"name": "contatos", "description": "Operações de CRUD de contatos"},
            {"name": "infra", "description": "Infrastructure and health check endpoints"},
        ],
        lifespan=lifespan,
    )
    app.state.db = db
    app.state.settings = settings

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(contatos_router)

    # Healthcheck
    @app.get("/health", tags=["infra"])
    async def health():
        return {"status": "ok", "env": settings.ENV}

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        status_code = exc.status_code
        if status_code >= 500:
            logger.error(
                "HTTP %s at %s %s: %s",
                status_code,
                request.method,
                request.url.path,
                exc.detail,
            )
        return JSONResponse(
            status_code=status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err.get('loc', ())[1:]) or 'body'}: {err.get('msg')}"
            for err in exc.errors()
        )
        logger.info("Payload inválido em %s %s: %s", request.method, request.url.path, problems)
        return JSONResponse(status_code=400, content={"error": f"Dados inválidos: {problems}"})

    # Global exception handler; detalhes ficam só no log
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(
            "Unhandled exception", extra={
                "method": request.method,
                "path": request.url.path,
            }
        )
        return JSONResponse(status_code=500, content={"error": "Erro interno do servidor."})

    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run("agenda.main:app", host=settings.APP_HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
