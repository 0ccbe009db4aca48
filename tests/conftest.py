# tests/conftest.py
"""
Configuração global do pytest para o Controle de Prazos.

Este arquivo é executado automaticamente pelo pytest antes dos testes.

IMPORTANTE: as variáveis de ambiente precisam estar definidas antes de
importar config.py (o limiter lê RATE_LIMIT_ENABLED na importação).
"""

import sys
import os

# Adiciona o diretório raiz do projeto ao PYTHONPATH
# para que os imports funcionem corretamente nos testes
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

# Configura variáveis de ambiente para testes
os.environ.setdefault("ENV", "test")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ADMIN_PASSWORD", "admin-test")


from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.connection import Base, get_db
from auth.models import User  # noqa: F401
from sistemas.documentos.models import Documento  # noqa: F401
from sistemas.produtividade.models import ProdutividadeServidor  # noqa: F401
from sistemas.configuracoes.models import ConfiguracaoSistema  # noqa: F401


SENHA_TESTE = "senha-teste-123"


@pytest.fixture
def agora():
    """Instante fixo de referência: 15/06/2025 12:00 UTC (08:00 em Manaus)"""
    return datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


# ==================================================
# BANCO EM MEMÓRIA E CLIENTE HTTP
# ==================================================

@pytest.fixture
def db_session():
    """Sessão em SQLite em memória, recriada a cada teste"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db_session):
    """TestClient com get_db apontando para a sessão de teste (sem lifespan)"""
    from main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def admin_user(db_session):
    from users.services import criar_usuario
    return criar_usuario(
        db_session, username="admin.teste", name="Admin Teste",
        role="admin", password=SENHA_TESTE, must_change_password=False
    )


@pytest.fixture
def common_user(db_session):
    from users.services import criar_usuario
    return criar_usuario(
        db_session, username="marco.silva", name="Marco Silva",
        cargo="Assistente Social", password=SENHA_TESTE, must_change_password=False
    )


def _token(client, username: str) -> dict:
    response = client.post(
        "/auth/login", data={"username": username, "password": SENHA_TESTE}
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def admin_headers(client, admin_user):
    return _token(client, admin_user.username)


@pytest.fixture
def user_headers(client, common_user):
    return _token(client, common_user.username)
