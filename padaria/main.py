# padaria/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import inspect, text
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__, models  # noqa: F401  (models registra as tabelas no Base)
from .core.config import settings
from .core.errors import DomainError, format_validation_errors
from .core.logging import setup_logging
from .database import Base, create_db_engine, create_session_factory, get_db
from .routers import cargos, clientes, funcionarios, produtos, relatorios, tipos_produto, vendas

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # O engine (pool de conexões) vive enquanto a aplicação estiver no ar
    setup_logging(settings.LOG_LEVEL)
    engine = create_db_engine(settings)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    if settings.CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
    logger.info("API da Padaria iniciada (banco: %s)", engine.url.render_as_string(hide_password=True))
    yield
    engine.dispose()
    logger.info("API da Padaria encerrada")


app = FastAPI(
    title="Padaria API",
    description="Back-end do sistema de vendas e estoque da padaria.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Todos os routers ficam sob /api
for module in (tipos_produto, produtos, clientes, cargos, funcionarios, vendas, relatorios):
    app.include_router(module.router, prefix="/api")


# --- Tratamento de erros ---

@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    content = {"success": False, "error": exc.message}
    errors = getattr(exc, "errors", None)
    if errors:
        content["errors"] = errors
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "Dados inválidos",
            "errors": format_validation_errors(exc.errors()),
        },
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        message = "Rota não encontrada"
    else:
        message = str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Erro não tratado em %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"success": False, "error": str(exc)})


# --- Rotas de infraestrutura ---

@app.get("/")
def read_root():
    """Confirma que a API está no ar e lista os grupos de endpoints."""
    return {
        "success": True,
        "message": "API da Padaria funcionando!",
        "version": __version__,
        "endpoints": {
            "tipos_produto": "/api/tipos-produto",
            "produtos": "/api/produtos",
            "clientes": "/api/clientes",
            "cargos": "/api/cargos",
            "funcionarios": "/api/funcionarios",
            "vendas": "/api/vendas",
            "relatorios": "/api/relatorios",
            "test_db": "/test-db",
        },
    }


@app.get("/test-db")
def test_db(db: Session = Depends(get_db)):
    db.execute(text("SELECT 1"))
    tabelas = inspect(db.get_bind()).get_table_names()
    return {
        "success": True,
        "message": "Conexão com o banco de dados OK",
        "total_tabelas": len(tabelas),
    }
