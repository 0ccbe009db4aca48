# database/__init__.py
"""
Conexão com o banco e inicialização das tabelas.
"""
