# sistemas/relatorios/agregacao.py
"""
Motor de agregação dos relatórios de produtividade.

Funções puras sobre coleções já carregadas de documentos e usuários:
não acessam banco, não leem o relógio e não alteram as entradas.
O instante de referência ("agora") é sempre recebido do chamador.

Regras:
- Documento arquivado conta SEMPRE como concluído, qualquer que seja o status
- Vencido = prazo < agora e status != Concluído, apenas entre os ativos
- Concluído com atraso não é vencido
- Toda razão com denominador zero resulta em 0
- Séries diária (30 dias) e mensal (6 meses) têm tamanho fixo, mesmo sem dados
- Dias e meses seguem o calendário do timezone local (padrão America/Manaus)

Os documentos precisam expor: id, type, status, deadline, assigned_to,
created_at, completed_at (archived_at é opcional). Usuários: id, name.
"""

import math
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, date, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sistemas.documentos.constants import StatusDocumento, CHAVES_POR_TIPO
from sistemas.relatorios.exceptions import EntradaInvalidaError
from utils.timezone import ensure_utc, to_local, get_timezone

DIAS_SERIE_DIARIA = 30
MESES_SERIE_MENSAL = 6
SEGUNDOS_POR_DIA = 24 * 60 * 60

MESES_ABREV = ["Jan", "Fev", "Mar", "Abr", "Mai", "Jun", "Jul", "Ago", "Set", "Out", "Nov", "Dez"]


# =====================================================
# Estruturas de saída
# =====================================================

@dataclass
class ContagemPorTipo:
    certidoes: int = 0
    relatorios: int = 0
    oficios: int = 0
    extincoes: int = 0

    def total(self) -> int:
        return self.certidoes + self.relatorios + self.oficios + self.extincoes

    def to_dict(self) -> Dict[str, int]:
        return {
            "certidoes": self.certidoes,
            "relatorios": self.relatorios,
            "oficios": self.oficios,
            "extincoes": self.extincoes,
        }


@dataclass
class ProducaoDiaria:
    date: str  # dd/MM
    created: int = 0
    completed: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date, "created": self.created, "completed": self.completed}


@dataclass
class TendenciaMensal:
    month: str  # MMM/yy
    created: int = 0
    completed: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"month": self.month, "created": self.created, "completed": self.completed}


@dataclass
class ProducaoMensalUsuario:
    month: str
    completed: int = 0
    total: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"month": self.month, "completed": self.completed, "total": self.total}


@dataclass
class ProdutividadeUsuario:
    """Indicadores de um usuário, restritos aos documentos atribuídos a ele"""
    user_id: int
    user_name: str
    total_documents: int = 0
    completed_documents: int = 0
    in_progress_documents: int = 0
    overdue_documents: int = 0
    completion_rate: float = 0
    average_completion_time: float = 0
    documents_by_type: ContagemPorTipo = field(default_factory=ContagemPorTipo)
    monthly_production: List[ProducaoMensalUsuario] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "user_name": self.user_name,
            "total_documents": self.total_documents,
            "completed_documents": self.completed_documents,
            "in_progress_documents": self.in_progress_documents,
            "overdue_documents": self.overdue_documents,
            "completion_rate": self.completion_rate,
            "average_completion_time": self.average_completion_time,
            "documents_by_type": self.documents_by_type.to_dict(),
            "monthly_production": [m.to_dict() for m in self.monthly_production],
        }


@dataclass
class RelatorioSistema:
    """Relatório de produtividade de todo o sistema"""
    total_documents: int = 0
    completed_documents: int = 0
    in_progress_documents: int = 0
    overdue_documents: int = 0
    completion_rate: float = 0
    average_completion_time: float = 0
    documents_by_type: ContagemPorTipo = field(default_factory=ContagemPorTipo)
    daily_production: List[ProducaoDiaria] = field(default_factory=list)
    monthly_trends: List[TendenciaMensal] = field(default_factory=list)
    user_productivity: List[ProdutividadeUsuario] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_documents": self.total_documents,
            "completed_documents": self.completed_documents,
            "in_progress_documents": self.in_progress_documents,
            "overdue_documents": self.overdue_documents,
            "completion_rate": self.completion_rate,
            "average_completion_time": self.average_completion_time,
            "documents_by_type": self.documents_by_type.to_dict(),
            "daily_production": [d.to_dict() for d in self.daily_production],
            "monthly_trends": [m.to_dict() for m in self.monthly_trends],
            "user_productivity": [u.to_dict() for u in self.user_productivity],
        }


@dataclass
class ResumoAno:
    year: int
    total_documents: int = 0
    completed_documents: int = 0
    completion_rate: float = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "year": self.year,
            "total_documents": self.total_documents,
            "completed_documents": self.completed_documents,
            "completion_rate": self.completion_rate,
        }


@dataclass
class ComparativoAnual:
    current_year: ResumoAno
    previous_year: ResumoAno
    growth_rate: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_year": self.current_year.to_dict(),
            "previous_year": self.previous_year.to_dict(),
            "growth_rate": self.growth_rate,
        }


# =====================================================
# Auxiliares de calendário
# =====================================================

def _resolver_tz(tz):
    if tz is None or isinstance(tz, str):
        return get_timezone(tz)
    return tz


def _inicio_do_mes(tz, ano: int, mes: int) -> datetime:
    """Meia-noite local do dia 1, timezone-aware"""
    ingenuo = datetime(ano, mes, 1)
    if hasattr(tz, "localize"):
        return tz.localize(ingenuo)
    return ingenuo.replace(tzinfo=tz)


def janela_diaria(agora: datetime, tz=None) -> List[date]:
    """Os 30 dias locais terminando no dia de "agora" (inclusive), em ordem crescente"""
    hoje = to_local(agora, _resolver_tz(tz)).date()
    return [hoje - timedelta(days=i) for i in range(DIAS_SERIE_DIARIA - 1, -1, -1)]


def janela_mensal(agora: datetime, tz=None) -> List[Tuple[datetime, datetime]]:
    """
    Os 6 meses locais terminando no mês de "agora" (inclusive).

    Cada item é (inicio, fim), com fim = último microssegundo do mês.
    """
    tz = _resolver_tz(tz)
    local = to_local(agora, tz)

    meses = []
    for recuo in range(MESES_SERIE_MENSAL - 1, -1, -1):
        ano, mes = local.year, local.month - recuo
        while mes <= 0:
            mes += 12
            ano -= 1
        proximo_ano, proximo_mes = (ano + 1, 1) if mes == 12 else (ano, mes + 1)
        inicio = _inicio_do_mes(tz, ano, mes)
        fim = _inicio_do_mes(tz, proximo_ano, proximo_mes) - timedelta(microseconds=1)
        meses.append((inicio, fim))
    return meses


def rotulo_dia(dia: date) -> str:
    return dia.strftime("%d/%m")


def rotulo_mes(inicio: datetime) -> str:
    """Abreviação pt-BR: "Jan/25", "Fev/25", ..."""
    return f"{MESES_ABREV[inicio.month - 1]}/{inicio.year % 100:02d}"


def _no_intervalo(momento: Optional[datetime], inicio: datetime, fim: datetime) -> bool:
    if momento is None:
        return False
    return inicio <= ensure_utc(momento) <= fim


# =====================================================
# Auxiliares de documentos
# =====================================================

def _como_lista(colecao, nome: str) -> list:
    """Materializa a coleção sem alterá-la; falha cedo se não for iterável"""
    if colecao is None or isinstance(colecao, (str, bytes)):
        raise EntradaInvalidaError(f"'{nome}' deve ser uma coleção, recebido {type(colecao).__name__}")
    try:
        return list(colecao)
    except TypeError:
        raise EntradaInvalidaError(f"'{nome}' deve ser uma coleção, recebido {type(colecao).__name__}")


def momento_conclusao(doc, arquivado: bool) -> Optional[datetime]:
    """completed_at; para arquivados sem essa data, archived_at"""
    concluido_em = getattr(doc, "completed_at", None)
    if concluido_em is None and arquivado:
        concluido_em = getattr(doc, "archived_at", None)
    return ensure_utc(concluido_em)


def _esta_vencido(doc, agora: datetime) -> bool:
    prazo = getattr(doc, "deadline", None)
    if prazo is None:
        return False
    return ensure_utc(prazo) < agora and doc.status != StatusDocumento.CONCLUIDO


def _contar_por_tipo(documentos: Iterable) -> ContagemPorTipo:
    contagem = ContagemPorTipo()
    for doc in documentos:
        chave = CHAVES_POR_TIPO.get(getattr(doc, "type", None))
        if chave:
            setattr(contagem, chave, getattr(contagem, chave) + 1)
    return contagem


def _tempo_medio_dias(concluidos: Iterable[Tuple[Any, bool]]) -> float:
    """Média em dias de (conclusão - criação) sobre os que têm as duas datas"""
    duracoes = []
    for doc, arquivado in concluidos:
        criado_em = getattr(doc, "created_at", None)
        concluido_em = momento_conclusao(doc, arquivado)
        if criado_em is None or concluido_em is None:
            continue
        duracoes.append((concluido_em - ensure_utc(criado_em)).total_seconds() / SEGUNDOS_POR_DIA)
    if not duracoes:
        return 0
    return sum(duracoes) / len(duracoes)


def _percentual(parte: int, total: int) -> float:
    if total == 0:
        return 0
    return parte / total * 100


# =====================================================
# Agregação por usuário
# =====================================================

def _produtividade_usuario(
    usuario,
    ativos: List,
    arquivados: List,
    agora: datetime,
    meses: List[Tuple[datetime, datetime]],
) -> ProdutividadeUsuario:
    user_id = usuario.id
    ativos_usuario = [d for d in ativos if d.assigned_to == user_id]
    arquivados_usuario = [d for d in arquivados if d.assigned_to == user_id]

    concluidos = (
        [(d, False) for d in ativos_usuario if d.status == StatusDocumento.CONCLUIDO]
        + [(d, True) for d in arquivados_usuario]
    )
    total = len(ativos_usuario) + len(arquivados_usuario)

    producao_mensal = []
    for inicio, fim in meses:
        producao_mensal.append(ProducaoMensalUsuario(
            month=rotulo_mes(inicio),
            completed=sum(
                1 for doc, arquivado in concluidos
                if _no_intervalo(momento_conclusao(doc, arquivado), inicio, fim)
            ),
            total=sum(
                1 for doc in ativos_usuario + arquivados_usuario
                if _no_intervalo(getattr(doc, "created_at", None), inicio, fim)
            ),
        ))

    return ProdutividadeUsuario(
        user_id=user_id,
        user_name=getattr(usuario, "name", "") or "",
        total_documents=total,
        completed_documents=len(concluidos),
        in_progress_documents=sum(1 for d in ativos_usuario if d.status == StatusDocumento.EM_ANDAMENTO),
        overdue_documents=sum(1 for d in ativos_usuario if _esta_vencido(d, agora)),
        completion_rate=_percentual(len(concluidos), total),
        average_completion_time=_tempo_medio_dias(concluidos),
        documents_by_type=_contar_por_tipo(ativos_usuario + arquivados_usuario),
        monthly_production=producao_mensal,
    )


def calcular_produtividade_usuario(usuario, ativos, arquivados, agora: datetime, tz=None) -> ProdutividadeUsuario:
    """
    Indicadores de um único usuário.

    Usuário sem documentos gera uma entrada zerada, com a série mensal
    completa (6 meses) preenchida com zeros.
    """
    ativos = _como_lista(ativos, "ativos")
    arquivados = _como_lista(arquivados, "arquivados")
    agora = ensure_utc(agora)
    return _produtividade_usuario(usuario, ativos, arquivados, agora, janela_mensal(agora, tz))


# =====================================================
# Relatório do sistema
# =====================================================

def calcular_relatorio_sistema(ativos, arquivados, usuarios, agora: datetime, tz=None) -> RelatorioSistema:
    """
    Calcula o relatório de produtividade completo.

    Args:
        ativos: documentos não arquivados (qualquer status)
        arquivados: documentos arquivados (contam como concluídos)
        usuarios: todos os usuários; cada um gera uma entrada
        agora: instante de referência (naive é interpretado como UTC)
        tz: timezone do calendário local (nome ou tzinfo; padrão TIMEZONE_LOCAL)

    Raises:
        EntradaInvalidaError: se alguma coleção não for iterável
    """
    ativos = _como_lista(ativos, "ativos")
    arquivados = _como_lista(arquivados, "arquivados")
    usuarios = _como_lista(usuarios, "usuarios")
    tz = _resolver_tz(tz)
    agora = ensure_utc(agora)

    todos = [(d, False) for d in ativos] + [(d, True) for d in arquivados]
    concluidos = (
        [(d, False) for d in ativos if d.status == StatusDocumento.CONCLUIDO]
        + [(d, True) for d in arquivados]
    )

    total = len(todos)
    total_concluidos = len(concluidos)

    # Série diária: igualdade de data local
    criados_por_dia = Counter()
    concluidos_por_dia = Counter()
    for doc, arquivado in todos:
        criado_em = getattr(doc, "created_at", None)
        if criado_em is not None:
            criados_por_dia[to_local(criado_em, tz).date()] += 1
        concluido_em = momento_conclusao(doc, arquivado)
        if concluido_em is not None:
            concluidos_por_dia[to_local(concluido_em, tz).date()] += 1

    producao_diaria = [
        ProducaoDiaria(
            date=rotulo_dia(dia),
            created=criados_por_dia.get(dia, 0),
            completed=concluidos_por_dia.get(dia, 0),
        )
        for dia in janela_diaria(agora, tz)
    ]

    # Série mensal: inicio <= t <= fim
    meses = janela_mensal(agora, tz)
    tendencias = [
        TendenciaMensal(
            month=rotulo_mes(inicio),
            created=sum(
                1 for doc, _ in todos
                if _no_intervalo(getattr(doc, "created_at", None), inicio, fim)
            ),
            completed=sum(
                1 for doc, arquivado in todos
                if _no_intervalo(momento_conclusao(doc, arquivado), inicio, fim)
            ),
        )
        for inicio, fim in meses
    ]

    return RelatorioSistema(
        total_documents=total,
        completed_documents=total_concluidos,
        in_progress_documents=sum(1 for d in ativos if d.status == StatusDocumento.EM_ANDAMENTO),
        overdue_documents=sum(1 for d in ativos if _esta_vencido(d, agora)),
        completion_rate=_percentual(total_concluidos, total),
        average_completion_time=_tempo_medio_dias(concluidos),
        documents_by_type=_contar_por_tipo(doc for doc, _ in todos),
        daily_production=producao_diaria,
        monthly_trends=tendencias,
        user_productivity=[
            _produtividade_usuario(u, ativos, arquivados, agora, meses) for u in usuarios
        ],
    )


# =====================================================
# Comparativo anual
# =====================================================

def _arredondar(valor: float) -> int:
    """Arredondamento comercial (0,5 sobe)"""
    return int(math.floor(valor + 0.5))


def _resumo_ano(documentos: List, ano: int, tz) -> ResumoAno:
    do_ano = [
        d for d in documentos
        if getattr(d, "created_at", None) is not None and to_local(d.created_at, tz).year == ano
    ]

    concluidos = 0
    for doc in do_ano:
        concluido_em = getattr(doc, "completed_at", None)
        arquivado_em = getattr(doc, "archived_at", None)
        arquivado = bool(getattr(doc, "is_archived", False))
        if doc.status == StatusDocumento.CONCLUIDO and concluido_em is not None \
                and to_local(concluido_em, tz).year == ano:
            concluidos += 1
        elif arquivado and arquivado_em is not None and to_local(arquivado_em, tz).year == ano:
            concluidos += 1

    return ResumoAno(
        year=ano,
        total_documents=len(do_ano),
        completed_documents=concluidos,
        completion_rate=_percentual(concluidos, len(do_ano)),
    )


def calcular_crescimento(total_atual: int, total_anterior: int) -> int:
    """
    Variação percentual arredondada.

    Base zero: 100 se houve documentos no ano atual, senão 0.
    """
    if total_anterior == 0:
        return 100 if total_atual > 0 else 0
    return _arredondar((total_atual - total_anterior) / total_anterior * 100)


def calcular_comparativo_anual(documentos, agora: datetime, ano_atual: Optional[int] = None, tz=None) -> ComparativoAnual:
    """
    Compara o ano atual com o anterior pelo ano local de criação.

    Args:
        documentos: ativos e arquivados juntos
        agora: instante de referência
        ano_atual: padrão = ano local de "agora"
    """
    documentos = _como_lista(documentos, "documentos")
    tz = _resolver_tz(tz)
    if ano_atual is None:
        ano_atual = to_local(agora, tz).year

    atual = _resumo_ano(documentos, ano_atual, tz)
    anterior = _resumo_ano(documentos, ano_atual - 1, tz)

    return ComparativoAnual(
        current_year=atual,
        previous_year=anterior,
        growth_rate=calcular_crescimento(atual.total_documents, anterior.total_documents),
    )
