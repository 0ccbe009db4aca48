# sistemas/__init__.py
"""
Subsistemas do Controle de Prazos: documentos, relatórios, produtividade e configurações
"""
