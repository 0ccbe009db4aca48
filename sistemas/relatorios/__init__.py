# sistemas/relatorios/__init__.py
"""
Relatórios de produtividade

- agregacao: motor de cálculo (funções puras, "agora" injetado)
- exportacao: JSON/CSV por período
- pdf: relatório paginado (reportlab)
"""
