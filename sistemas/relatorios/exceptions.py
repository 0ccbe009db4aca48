# sistemas/relatorios/exceptions.py
"""
Exceções específicas do módulo de Relatórios
"""


class RelatoriosError(Exception):
    """Erro base do módulo"""
    pass


class EntradaInvalidaError(RelatoriosError, TypeError):
    """Coleção de documentos/usuários não é iterável"""
    pass


class PeriodoInvalidoError(RelatoriosError, ValueError):
    """Período de exportação desconhecido"""
    pass


class FormatoInvalidoError(RelatoriosError, ValueError):
    """Formato de exportação desconhecido"""
    pass
