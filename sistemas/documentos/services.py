# sistemas/documentos/services.py
"""
Serviço do registro de documentos.

Concentra as consultas e as transições de ciclo de vida:
criação -> edição/reatribuição -> conclusão -> arquivamento -> restauração
-> exclusão. Os routers só traduzem as exceções para HTTP.
"""

from datetime import datetime
from typing import Optional, List, Dict, Any
from sqlalchemy.orm import Session, joinedload

from auth.models import User
from sistemas.documentos.models import Documento
from sistemas.documentos.constants import StatusDocumento
from sistemas.documentos.exceptions import (
    DocumentoNaoEncontradoError, ProcessoDuplicadoError,
    ResponsavelInvalidoError, TransicaoInvalidaError
)
from utils.logging_config import get_logger
from utils.timezone import now_utc, ensure_utc

logger = get_logger(__name__)


class DocumentoService:
    """Operações de leitura e escrita sobre a tabela documents"""

    def __init__(self, db: Session):
        self.db = db

    # ==========================================
    # Consultas
    # ==========================================

    def _query(self):
        return self.db.query(Documento).options(joinedload(Documento.responsavel))

    def listar_ativos(self, limit: Optional[int] = None) -> List[Documento]:
        """
        Documentos não arquivados.

        Com limit, retorna os mais recentes (por criação); sem limit,
        todos ordenados pelo prazo.
        """
        return self._ordenar_ativos(self._query().filter(Documento.is_archived.is_(False)), limit)

    def listar_por_usuario(self, user_id: int, limit: Optional[int] = None) -> List[Documento]:
        """Documentos não arquivados atribuídos ao usuário (mesma ordenação de listar_ativos)"""
        query = self._query().filter(
            Documento.is_archived.is_(False),
            Documento.assigned_to == user_id,
        )
        return self._ordenar_ativos(query, limit)

    @staticmethod
    def _ordenar_ativos(query, limit: Optional[int]) -> List[Documento]:
        if limit:
            return query.order_by(Documento.created_at.desc(), Documento.id.desc()).limit(limit).all()
        return query.order_by(Documento.deadline.asc(), Documento.id.asc()).all()

    def listar_arquivados(self) -> List[Documento]:
        return (
            self._query()
            .filter(Documento.is_archived.is_(True))
            .order_by(Documento.archived_at.desc(), Documento.id.desc())
            .all()
        )

    def listar_todos(self) -> List[Documento]:
        """Ativos e arquivados, mais recentes primeiro (usado nas exportações)"""
        return self._query().order_by(Documento.created_at.desc(), Documento.id.desc()).all()

    def contar_por_usuario(self, user_id: int) -> int:
        """Quantidade de documentos (ativos ou arquivados) atribuídos ao usuário"""
        return self.db.query(Documento).filter(Documento.assigned_to == user_id).count()

    def obter(self, documento_id: int) -> Documento:
        documento = self._query().filter(Documento.id == documento_id).first()
        if not documento:
            raise DocumentoNaoEncontradoError(f"Documento {documento_id} não encontrado")
        return documento

    # ==========================================
    # Escrita
    # ==========================================

    def criar(self, dados: Dict[str, Any], agora: Optional[datetime] = None) -> Documento:
        """Cria documento; status Concluído já recebe completed_at"""
        agora = agora or now_utc()

        self._verificar_processo_unico(dados["process_number"])
        self._verificar_responsavel(dados.get("assigned_to"))

        status = dados.get("status") or StatusDocumento.EM_ANDAMENTO
        documento = Documento(
            process_number=dados["process_number"],
            prisoner_name=dados["prisoner_name"],
            type=dados["type"],
            deadline=ensure_utc(dados["deadline"]),
            status=status,
            assigned_to=dados.get("assigned_to"),
            created_at=agora,
            completed_at=agora if status == StatusDocumento.CONCLUIDO else None,
            is_archived=False,
        )

        self.db.add(documento)
        self.db.commit()
        self.db.refresh(documento)

        logger.info("Documento criado", documento_id=documento.id, processo=documento.process_number)
        return documento

    def atualizar(
        self,
        documento_id: int,
        dados: Dict[str, Any],
        agora: Optional[datetime] = None
    ) -> Documento:
        """Atualização parcial; apenas as chaves presentes em dados são aplicadas"""
        documento = self.obter(documento_id)
        self._aplicar_alteracoes(documento, dados, agora or now_utc())

        self.db.commit()
        self.db.refresh(documento)
        return documento

    def atualizar_em_lote(
        self,
        ids: List[int],
        dados: Dict[str, Any],
        agora: Optional[datetime] = None
    ) -> List[Documento]:
        """
        Aplica as mesmas alterações a vários documentos.

        Tudo ou nada: se algum id não existir, nada é gravado.
        """
        agora = agora or now_utc()
        ids_unicos = list(dict.fromkeys(ids))

        documentos = self._query().filter(Documento.id.in_(ids_unicos)).all()
        encontrados = {d.id for d in documentos}
        faltando = [i for i in ids_unicos if i not in encontrados]
        if faltando:
            raise DocumentoNaoEncontradoError(f"Documentos não encontrados: {faltando}")

        try:
            for documento in documentos:
                self._aplicar_alteracoes(documento, dados, agora)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info("Atualização em lote", quantidade=len(documentos), campos=sorted(dados))
        return documentos

    def excluir(self, documento_id: int) -> str:
        """Exclusão definitiva; retorna o número do processo excluído"""
        documento = self.obter(documento_id)
        process_number = documento.process_number
        self.db.delete(documento)
        self.db.commit()
        return process_number

    def arquivar(self, documento_id: int, agora: Optional[datetime] = None) -> Documento:
        """
        Arquiva o documento.

        Documentos arquivados contam como concluídos nos relatórios; se ainda
        não havia data de conclusão, a data de arquivamento é usada.
        """
        agora = agora or now_utc()
        documento = self.obter(documento_id)
        if documento.is_archived:
            raise TransicaoInvalidaError("Documento já está arquivado")

        documento.is_archived = True
        documento.archived_at = agora
        documento.status = StatusDocumento.ARQUIVADO
        if documento.completed_at is None:
            documento.completed_at = agora

        self.db.commit()
        self.db.refresh(documento)
        return documento

    def restaurar(self, documento_id: int) -> Documento:
        """Devolve um documento arquivado para Em Andamento"""
        documento = self.obter(documento_id)
        if not documento.is_archived:
            raise TransicaoInvalidaError("Documento não está arquivado")

        documento.is_archived = False
        documento.archived_at = None
        documento.completed_at = None
        documento.status = StatusDocumento.EM_ANDAMENTO

        self.db.commit()
        self.db.refresh(documento)
        return documento

    # ==========================================
    # Auxiliares
    # ==========================================

    def _verificar_processo_unico(self, process_number: str, ignorar_id: Optional[int] = None):
        query = self.db.query(Documento.id).filter(Documento.process_number == process_number)
        if ignorar_id is not None:
            query = query.filter(Documento.id != ignorar_id)
        if query.first():
            raise ProcessoDuplicadoError(f"Processo '{process_number}' já cadastrado")

    def _verificar_responsavel(self, user_id: Optional[int]):
        if user_id is None:
            return
        if not self.db.query(User.id).filter(User.id == user_id).first():
            raise ResponsavelInvalidoError(f"Usuário {user_id} não encontrado")

    def _aplicar_alteracoes(self, documento: Documento, dados: Dict[str, Any], agora: datetime):
        if "process_number" in dados and dados["process_number"] != documento.process_number:
            self._verificar_processo_unico(dados["process_number"], ignorar_id=documento.id)
            documento.process_number = dados["process_number"]

        if "assigned_to" in dados:
            self._verificar_responsavel(dados["assigned_to"])
            documento.assigned_to = dados["assigned_to"]

        for campo in ("prisoner_name", "type"):
            if campo in dados and dados[campo] is not None:
                setattr(documento, campo, dados[campo])

        if dados.get("deadline") is not None:
            documento.deadline = ensure_utc(dados["deadline"])

        novo_status = dados.get("status")
        if novo_status is not None and documento.is_archived:
            raise TransicaoInvalidaError("Restaure o documento antes de alterar o status")

        if novo_status == StatusDocumento.CONCLUIDO:
            if documento.status != StatusDocumento.CONCLUIDO or dados.get("completed_at"):
                documento.completed_at = ensure_utc(dados.get("completed_at")) or agora
            documento.status = novo_status
        elif novo_status == StatusDocumento.EM_ANDAMENTO:
            # Reabertura descarta a data de conclusão
            documento.status = novo_status
            documento.completed_at = None
        elif dados.get("completed_at") is not None and documento.status == StatusDocumento.CONCLUIDO:
            documento.completed_at = ensure_utc(dados["completed_at"])
