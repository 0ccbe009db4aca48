# utils/timezone.py
"""
POLÍTICA GLOBAL DE TIMEZONE DO SISTEMA

REGRAS:
1. GRAVAÇÃO NO BANCO: Sempre UTC (timezone-aware)
2. CALENDÁRIO (prazos, relatórios diários/mensais): timezone local da unidade
   (padrão America/Manaus, configurável via TIMEZONE_LOCAL)
3. SERIALIZAÇÃO JSON: ISO 8601 com timezone explícito

USO:
    from utils.timezone import now_utc, to_local, ensure_utc

    created_at = now_utc()
    dia_local = to_local(created_at).date()

IMPORTANTE:
- Datetimes naive vindos do banco (SQLite) são interpretados como UTC
- Nunca use datetime.utcnow() ou datetime.now() diretamente
"""

from datetime import datetime, timezone
from typing import Optional
import pytz

from config import TIMEZONE_LOCAL as TIMEZONE_LOCAL_NAME

# =============================================================================
# CONFIGURAÇÃO DE TIMEZONE
# =============================================================================

TIMEZONE_LOCAL = pytz.timezone(TIMEZONE_LOCAL_NAME)

UTC = timezone.utc


# =============================================================================
# FUNÇÕES PRINCIPAIS
# =============================================================================

def now_utc() -> datetime:
    """
    Retorna o datetime atual em UTC com timezone-aware.

    USE ESTA FUNÇÃO para gravar timestamps no banco de dados e como
    referência "agora" injetada nos cálculos de relatório.
    """
    return datetime.now(UTC)


def now_local() -> datetime:
    """Retorna o datetime atual no timezone local da unidade."""
    return datetime.now(TIMEZONE_LOCAL)


def get_timezone(nome: Optional[str] = None):
    """
    Resolve um timezone pelo nome (case-insensitive).

    As configurações antigas gravavam "america/manaus" em minúsculas,
    então o nome é comparado sem diferenciar caixa.

    Raises:
        pytz.UnknownTimeZoneError: se o nome não existir
    """
    if not nome:
        return TIMEZONE_LOCAL

    for candidato in pytz.all_timezones:
        if candidato.lower() == nome.lower():
            return pytz.timezone(candidato)

    raise pytz.UnknownTimeZoneError(nome)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Normaliza um datetime para UTC timezone-aware.

    - Se naive: assume que já está em UTC (padrão de gravação do sistema)
    - Se aware: converte para UTC
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def to_local(dt: Optional[datetime], tz=None) -> Optional[datetime]:
    """
    Converte um datetime para o timezone local.

    Aceita tanto naive quanto aware datetimes:
    - Se naive: assume que está em UTC
    - Se aware: converte para o timezone local

    Args:
        dt: Datetime a converter (pode ser None)
        tz: Timezone de destino, tzinfo ou nome (default: TIMEZONE_LOCAL)

    Example:
        >>> to_local(datetime(2026, 1, 20, 18, 30)).hour
        14
    """
    if dt is None:
        return None

    if tz is None or isinstance(tz, str):
        tz = get_timezone(tz)

    return ensure_utc(dt).astimezone(tz)


def format_local(dt: Optional[datetime], format: str = "%d/%m/%Y %H:%M", tz=None) -> str:
    """
    Formata um datetime no timezone local para exibição.

    Returns:
        str: Data formatada no timezone local (ou "-" se None)
    """
    if dt is None:
        return "-"

    return to_local(dt, tz).strftime(format)


def format_iso(dt: Optional[datetime]) -> str:
    """ISO 8601 em UTC, ou string vazia se None (usado na exportação CSV)."""
    if dt is None:
        return ""

    return ensure_utc(dt).isoformat()


def parse_iso(iso_string: str) -> Optional[datetime]:
    """
    Parseia uma string ISO 8601 para datetime timezone-aware.

    Returns:
        datetime: Datetime timezone-aware (ou None se inválido)
    """
    if not iso_string:
        return None

    try:
        dt = datetime.fromisoformat(iso_string.replace('Z', '+00:00'))
    except (ValueError, AttributeError):
        return None

    return ensure_utc(dt)


# =============================================================================
# FUNÇÕES PARA SQLALCHEMY
# =============================================================================

def get_utc_now():
    """
    Função callable para uso em Column(default=...).

    USE EM MODELS:
        created_at = Column(DateTime(timezone=True), default=get_utc_now)
    """
    return now_utc()
