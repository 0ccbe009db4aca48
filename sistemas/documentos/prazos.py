# sistemas/documentos/prazos.py
"""
Rótulos de prazo derivados (Urgente / Vencido) e agrupamento por vencimento.

Nada aqui é gravado no banco: os rótulos são calculados a partir de
(prazo, status, agora, dias de urgência) sempre que um documento é exibido.
Todas as funções recebem "agora" explicitamente.
"""

import math
from datetime import datetime
from typing import Dict, Iterable, List

from sistemas.documentos.constants import StatusDocumento
from utils.timezone import ensure_utc

SEGUNDOS_POR_DIA = 24 * 60 * 60


def _esta_concluido(doc) -> bool:
    return doc.status == StatusDocumento.CONCLUIDO


def _esta_arquivado(doc) -> bool:
    return bool(getattr(doc, "is_archived", False)) or doc.status == StatusDocumento.ARQUIVADO


def dias_ate_prazo(deadline: datetime, agora: datetime) -> int:
    """
    Dias restantes até o prazo, arredondados para cima.

    Negativo quando o prazo já passou (-1 = venceu há menos de dois dias).
    """
    segundos = (ensure_utc(deadline) - ensure_utc(agora)).total_seconds()
    return math.ceil(segundos / SEGUNDOS_POR_DIA)


def esta_vencido(doc, agora: datetime) -> bool:
    """Prazo passou e o documento não foi concluído"""
    return ensure_utc(doc.deadline) < ensure_utc(agora) and not _esta_concluido(doc)


def status_exibicao(doc, agora: datetime, dias_urgente: int) -> str:
    """
    Status a ser exibido para o documento.

    Ordem de precedência: Arquivado, Concluído, Vencido, Urgente, Em Andamento.
    """
    if _esta_arquivado(doc):
        return StatusDocumento.ARQUIVADO
    if _esta_concluido(doc):
        return StatusDocumento.CONCLUIDO
    if esta_vencido(doc, agora):
        return StatusDocumento.VENCIDO
    if dias_ate_prazo(doc.deadline, agora) <= dias_urgente:
        return StatusDocumento.URGENTE
    return StatusDocumento.EM_ANDAMENTO


def classificar_prazos(
    documentos: Iterable,
    agora: datetime,
    dias_urgente: int,
    dias_alerta: int,
) -> Dict[str, List]:
    """
    Agrupa documentos ativos pela proximidade do prazo.

    Grupos: overdue (vencidos), urgent (até dias_urgente dias inteiros),
    this_week (até dias_alerta), upcoming (demais) e completed.
    Cada grupo é ordenado pelo prazo mais próximo.
    """
    grupos = {
        "overdue": [],
        "urgent": [],
        "this_week": [],
        "upcoming": [],
        "completed": [],
    }
    agora_utc = ensure_utc(agora)

    for doc in documentos:
        if _esta_concluido(doc):
            grupos["completed"].append(doc)
            continue

        deadline = ensure_utc(doc.deadline)
        if deadline < agora_utc:
            grupos["overdue"].append(doc)
            continue

        # Dias inteiros completos até o prazo
        dias = (deadline - agora_utc).days
        if dias <= dias_urgente:
            grupos["urgent"].append(doc)
        elif dias <= dias_alerta:
            grupos["this_week"].append(doc)
        else:
            grupos["upcoming"].append(doc)

    for chave in grupos:
        grupos[chave].sort(key=lambda d: ensure_utc(d.deadline))

    return grupos
