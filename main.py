# main.py
"""
Controle de Prazos - Aplicação FastAPI Principal

Reúne os módulos:
- Documentos (registro, prazos e arquivamento)
- Dashboard e Relatórios de produtividade
- Servidores (snapshots de produtividade)
- Configurações do sistema

Com autenticação centralizada via JWT.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from slowapi.errors import RateLimitExceeded

from config import ENV, SYSTEM_NAME
from database.init_db import init_database
from middleware.request_id import RequestIDMiddleware
from utils.logging_config import setup_logging, get_logger
from utils.rate_limit import limiter, rate_limit_exceeded_handler
from auth.router import router as auth_router
from users.router import router as users_router

# Import dos sistemas
from sistemas.documentos.router import router as documentos_router
from sistemas.documentos.router_dashboard import router as dashboard_router
from sistemas.configuracoes.router import router as configuracoes_router
from sistemas.produtividade.router import router as produtividade_router
from sistemas.relatorios.router import router as relatorios_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifecycle events da aplicação.
    Executa na inicialização e no shutdown.
    """
    # Startup
    setup_logging()
    logger.info("Iniciando aplicação", env=ENV)
    init_database()
    yield
    # Shutdown
    logger.info("Encerrando aplicação")


# Cria a aplicação FastAPI
app = FastAPI(
    title="Controle de Prazos",
    description=SYSTEM_NAME,
    version="1.0.0",
    lifespan=lifespan
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Request ID em todas as requisições
app.add_middleware(RequestIDMiddleware)

# Configuração de CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ==================================================
# ROTAS DO PORTAL
# ==================================================

@app.get("/health")
async def health_check():
    """Health check para monitoramento"""
    return {"status": "ok", "service": "controle-prazos", "env": ENV}


# ==================================================
# ROUTERS DE AUTENTICAÇÃO E USUÁRIOS
# ==================================================

app.include_router(auth_router)
app.include_router(users_router)


# ==================================================
# ROUTERS DOS SISTEMAS
# ==================================================

app.include_router(documentos_router)
app.include_router(dashboard_router)
app.include_router(configuracoes_router)
app.include_router(produtividade_router)
app.include_router(relatorios_router)


# ==================================================
# EXECUÇÃO DIRETA
# ==================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
