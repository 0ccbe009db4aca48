# sistemas/produtividade/services.py
"""
Atualização e consulta dos snapshots de produtividade por servidor.

Os números vêm do motor de agregação (mesmas regras do relatório):
arquivados contam como concluídos.
"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session, joinedload

from auth.models import User
from sistemas.documentos.services import DocumentoService
from sistemas.produtividade.models import ProdutividadeServidor
from sistemas.relatorios.agregacao import calcular_relatorio_sistema
from utils.logging_config import get_logger
from utils.timezone import now_utc

logger = get_logger(__name__)


def _percentual_inteiro(taxa: float) -> int:
    return int(taxa + 0.5)


class ProdutividadeService:
    """Snapshots da tabela servers"""

    def __init__(self, db: Session):
        self.db = db

    def listar(self) -> List[ProdutividadeServidor]:
        return (
            self.db.query(ProdutividadeServidor)
            .options(joinedload(ProdutividadeServidor.user))
            .order_by(ProdutividadeServidor.completion_percentage.desc(), ProdutividadeServidor.id)
            .all()
        )

    def obter(self, snapshot_id: int) -> Optional[ProdutividadeServidor]:
        return (
            self.db.query(ProdutividadeServidor)
            .options(joinedload(ProdutividadeServidor.user))
            .filter(ProdutividadeServidor.id == snapshot_id)
            .first()
        )

    def atualizar(self, agora: Optional[datetime] = None, tz=None) -> List[ProdutividadeServidor]:
        """
        Recalcula o snapshot de todos os usuários ativos.

        Cria a linha do usuário na primeira atualização.
        """
        agora = agora or now_utc()
        documentos = DocumentoService(self.db)
        usuarios = self.db.query(User).filter(User.is_active.is_(True)).order_by(User.id).all()

        relatorio = calcular_relatorio_sistema(
            documentos.listar_ativos(), documentos.listar_arquivados(), usuarios, agora, tz
        )

        existentes = {s.user_id: s for s in self.db.query(ProdutividadeServidor).all()}
        atualizados = []
        for produtividade in relatorio.user_productivity:
            snapshot = existentes.get(produtividade.user_id)
            if snapshot is None:
                snapshot = ProdutividadeServidor(user_id=produtividade.user_id)
                self.db.add(snapshot)

            snapshot.total_documents = produtividade.total_documents
            snapshot.completed_documents = produtividade.completed_documents
            snapshot.completion_percentage = _percentual_inteiro(produtividade.completion_rate)
            snapshot.updated_at = agora
            atualizados.append(snapshot)

        self.db.commit()
        logger.info("Snapshots de produtividade atualizados", quantidade=len(atualizados))
        return atualizados
