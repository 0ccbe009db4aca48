# sistemas/produtividade/__init__.py
"""
Snapshots de produtividade por servidor (cache atualizado sob demanda)
"""
