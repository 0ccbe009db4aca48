# sistemas/configuracoes/__init__.py
"""
Configurações globais do sistema (nome, unidade, timezone e limites de prazo)
"""
