# sistemas/documentos/router.py
"""
Router do registro de documentos.

Endpoints para:
- Listagem (ativos, recentes, arquivados) e consulta
- Agrupamento por vencimento (página de prazos)
- Criação, edição, edição em lote e exclusão
- Arquivamento e restauração
"""

from typing import Optional, List
from fastapi import APIRouter, HTTPException, Depends, Query, Request, Response, status
from sqlalchemy.orm import Session

from database.connection import get_db
from auth.models import User
from auth.dependencies import get_current_active_user
from sistemas.configuracoes.services import obter_configuracoes
from sistemas.documentos.models import Documento
from sistemas.documentos.schemas import (
    DocumentoCreate, DocumentoUpdate, DocumentoBulkUpdate,
    DocumentoResponse, BulkUpdateResponse, PrazosResponse
)
from sistemas.documentos.services import DocumentoService
from sistemas.documentos.prazos import status_exibicao, classificar_prazos, dias_ate_prazo
from sistemas.documentos.exceptions import (
    DocumentosError, DocumentoNaoEncontradoError, ProcessoDuplicadoError
)
from utils.audit import AuditEvent, log_document_event
from utils.timezone import now_utc

router = APIRouter(prefix="/documents", tags=["Documentos"])


def _erro_http(e: DocumentosError) -> HTTPException:
    """Traduz exceções do serviço para HTTP"""
    if isinstance(e, DocumentoNaoEncontradoError):
        return HTTPException(status_code=404, detail="Documento não encontrado")
    if isinstance(e, ProcessoDuplicadoError):
        return HTTPException(status_code=409, detail=str(e))
    # ResponsavelInvalidoError, TransicaoInvalidaError
    return HTTPException(status_code=400, detail=str(e))


def _resposta(documento: Documento, agora, dias_urgente: int) -> DocumentoResponse:
    resposta = DocumentoResponse.model_validate(documento)
    resposta.display_status = status_exibicao(documento, agora, dias_urgente)
    resposta.days_until_deadline = dias_ate_prazo(documento.deadline, agora)
    return resposta


def _respostas(documentos: List[Documento], db: Session) -> List[DocumentoResponse]:
    agora = now_utc()
    dias_urgente = obter_configuracoes(db).urgent_days
    return [_resposta(d, agora, dias_urgente) for d in documentos]


# ==========================================
# Consultas
# ==========================================

@router.get("", response_model=List[DocumentoResponse])
async def listar_documentos(
    limit: Optional[int] = Query(None, ge=1, le=500, description="Retorna apenas os N mais recentes"),
    assigned_to: Optional[int] = Query(None, description="Apenas documentos deste responsável"),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Lista documentos ativos (não arquivados), opcionalmente de um responsável"""
    service = DocumentoService(db)
    if assigned_to is not None:
        documentos = service.listar_por_usuario(assigned_to, limit=limit)
    else:
        documentos = service.listar_ativos(limit=limit)
    return _respostas(documentos, db)


@router.get("/archived", response_model=List[DocumentoResponse])
async def listar_arquivados(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Lista documentos arquivados, mais recentes primeiro"""
    documentos = DocumentoService(db).listar_arquivados()
    return _respostas(documentos, db)


@router.get("/deadlines", response_model=PrazosResponse)
async def listar_prazos(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """
    Agrupa os documentos ativos por vencimento:
    vencidos, urgentes, desta semana, próximos e concluídos.
    """
    agora = now_utc()
    configuracao = obter_configuracoes(db)
    documentos = DocumentoService(db).listar_ativos()

    grupos = classificar_prazos(
        documentos, agora,
        dias_urgente=configuracao.urgent_days,
        dias_alerta=configuracao.warning_days
    )
    return {
        chave: [_resposta(d, agora, configuracao.urgent_days) for d in lista]
        for chave, lista in grupos.items()
    }


@router.get("/{documento_id}", response_model=DocumentoResponse)
async def obter_documento(
    documento_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    try:
        documento = DocumentoService(db).obter(documento_id)
    except DocumentosError as e:
        raise _erro_http(e)
    return _respostas([documento], db)[0]


# ==========================================
# Escrita
# ==========================================

@router.post("", response_model=DocumentoResponse, status_code=status.HTTP_201_CREATED)
async def criar_documento(
    dados: DocumentoCreate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Cadastra um novo documento (status inicial Em Andamento, salvo se informado)"""
    try:
        documento = DocumentoService(db).criar(dados.model_dump())
    except DocumentosError as e:
        raise _erro_http(e)
    return _respostas([documento], db)[0]


@router.patch("/bulk", response_model=BulkUpdateResponse)
async def atualizar_em_lote(
    dados: DocumentoBulkUpdate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Aplica status, responsável e/ou prazo a vários documentos de uma vez"""
    alteracoes = dados.model_dump(exclude_unset=True, exclude={"ids"})
    if not alteracoes:
        raise HTTPException(status_code=400, detail="Nenhuma alteração informada")

    try:
        documentos = DocumentoService(db).atualizar_em_lote(dados.ids, alteracoes)
    except DocumentosError as e:
        raise _erro_http(e)

    return BulkUpdateResponse(updated=len(documentos), ids=[d.id for d in documentos])


@router.patch("/{documento_id}", response_model=DocumentoResponse)
@router.put("/{documento_id}", response_model=DocumentoResponse)
async def atualizar_documento(
    documento_id: int,
    dados: DocumentoUpdate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """
    Atualiza um documento. Apenas os campos enviados são alterados.

    Marcar como Concluído grava a data de conclusão (agora, se não
    informada); voltar para Em Andamento a descarta.
    """
    try:
        documento = DocumentoService(db).atualizar(
            documento_id, dados.model_dump(exclude_unset=True)
        )
    except DocumentosError as e:
        raise _erro_http(e)
    return _respostas([documento], db)[0]


@router.delete("/{documento_id}", status_code=status.HTTP_204_NO_CONTENT)
async def excluir_documento(
    documento_id: int,
    request: Request,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Exclui o documento definitivamente"""
    try:
        process_number = DocumentoService(db).excluir(documento_id)
    except DocumentosError as e:
        raise _erro_http(e)

    log_document_event(
        AuditEvent.DOCUMENT_DELETED, documento_id, process_number,
        current_user.id, current_user.username, request
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{documento_id}/archive", response_model=DocumentoResponse)
async def arquivar_documento(
    documento_id: int,
    request: Request,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Arquiva o documento (passa a contar como concluído nos relatórios)"""
    try:
        documento = DocumentoService(db).arquivar(documento_id)
    except DocumentosError as e:
        raise _erro_http(e)

    log_document_event(
        AuditEvent.DOCUMENT_ARCHIVED, documento.id, documento.process_number,
        current_user.id, current_user.username, request
    )
    return _respostas([documento], db)[0]


@router.post("/{documento_id}/restore", response_model=DocumentoResponse)
@router.patch("/{documento_id}/restore", response_model=DocumentoResponse)
async def restaurar_documento(
    documento_id: int,
    request: Request,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Restaura um documento arquivado para Em Andamento"""
    try:
        documento = DocumentoService(db).restaurar(documento_id)
    except DocumentosError as e:
        raise _erro_http(e)

    log_document_event(
        AuditEvent.DOCUMENT_RESTORED, documento.id, documento.process_number,
        current_user.id, current_user.username, request
    )
    return _respostas([documento], db)[0]
