# database/init_db.py
"""
Inicialização do banco de dados, seed do usuário admin e dados de exemplo
"""

import time
from datetime import timedelta
from sqlalchemy.exc import OperationalError
from sqlalchemy import text
from database.connection import engine, Base, session_scope
from auth.models import User, gerar_iniciais, ROLE_ADMIN
from auth.security import get_password_hash
from config import ADMIN_USERNAME, ADMIN_PASSWORD, DEFAULT_USER_PASSWORD, SEED_SAMPLE_DATA
from utils.timezone import now_utc

# Importa modelos para criar tabelas
from sistemas.documentos.models import Documento
from sistemas.produtividade.models import ProdutividadeServidor  # noqa: F401
from sistemas.configuracoes.models import ConfiguracaoSistema  # noqa: F401


USUARIOS_EXEMPLO = [
    # username, nome, cargo
    ("ana.costa", "Ana Costa", "Administradora"),
    ("marco.silva", "Marco Silva", "Assistente Social"),
    ("lucia.ferreira", "Lucia Ferreira", "Psicóloga"),
    ("roberto.castro", "Roberto Castro", "Advogado"),
]

DOCUMENTOS_EXEMPLO = [
    # processo, interno, tipo, dias até o prazo, status, username do responsável
    ("2024.001.0156", "João Silva Santos", "Certidão", 1, "Em Andamento", "ana.costa"),
    ("2024.001.0157", "Maria Oliveira Costa", "Relatório", 3, "Em Andamento", "marco.silva"),
    ("2024.001.0158", "Carlos Eduardo Lima", "Ofício", 7, "Concluído", "lucia.ferreira"),
    ("2024.001.0159", "Ana Paula Rodrigues", "Certidão", 5, "Em Andamento", "ana.costa"),
    ("2024.001.0160", "Fernando Santos Pereira", "Relatório", -2, "Em Andamento", "roberto.castro"),
]


def wait_for_db(max_retries=10, delay=3):
    """Aguarda o banco de dados ficar disponível"""
    for attempt in range(max_retries):
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            print("✅ Conexão com banco de dados estabelecida!")
            return True
        except OperationalError as e:
            if attempt < max_retries - 1:
                print(f"⏳ Aguardando banco de dados... tentativa {attempt + 1}/{max_retries}")
                time.sleep(delay)
            else:
                print(f"❌ Não foi possível conectar ao banco após {max_retries} tentativas")
                raise e
    return False


def create_tables():
    """Cria todas as tabelas no banco de dados"""
    Base.metadata.create_all(bind=engine)
    print("✅ Tabelas criadas com sucesso!")


def seed_admin():
    """Cria o usuário administrador inicial se não existir"""
    with session_scope() as db:
        existing_admin = db.query(User).filter(User.username == ADMIN_USERNAME).first()

        if existing_admin:
            print(f"ℹ️  Usuário admin '{ADMIN_USERNAME}' já existe.")
            return

        db.add(User(
            username=ADMIN_USERNAME,
            name="Administrador",
            hashed_password=get_password_hash(ADMIN_PASSWORD),
            role=ROLE_ADMIN,
            initials="AD",
            must_change_password=True,
            is_active=True
        ))
        print(f"✅ Usuário admin '{ADMIN_USERNAME}' criado com sucesso!")
        print("   ⚠️  Altere a senha no primeiro acesso!")


def seed_sample_data():
    """
    Cria usuários e documentos de exemplo (SEED_SAMPLE_DATA=true).

    Só executa com a tabela de documentos vazia.
    """
    with session_scope() as db:
        if db.query(Documento.id).first():
            print("ℹ️  Documentos já existem, dados de exemplo ignorados.")
            return

        usuarios = {}
        for username, nome, cargo in USUARIOS_EXEMPLO:
            user = db.query(User).filter(User.username == username).first()
            if not user:
                user = User(
                    username=username,
                    name=nome,
                    hashed_password=get_password_hash(DEFAULT_USER_PASSWORD),
                    role="user",
                    cargo=cargo,
                    initials=gerar_iniciais(nome),
                    must_change_password=True,
                )
                db.add(user)
            usuarios[username] = user
        db.flush()

        agora = now_utc()
        for processo, interno, tipo, dias, status, username in DOCUMENTOS_EXEMPLO:
            db.add(Documento(
                process_number=processo,
                prisoner_name=interno,
                type=tipo,
                deadline=agora + timedelta(days=dias),
                status=status,
                assigned_to=usuarios[username].id,
                created_at=agora,
                completed_at=agora if status == "Concluído" else None,
            ))

        print(f"✅ {len(DOCUMENTOS_EXEMPLO)} documentos de exemplo criados!")


def init_database():
    """Inicializa o banco de dados completo"""
    print("🔧 Inicializando banco de dados...")
    wait_for_db()
    create_tables()
    seed_admin()
    if SEED_SAMPLE_DATA:
        seed_sample_data()
    print("✅ Banco de dados inicializado!")


if __name__ == "__main__":
    init_database()
