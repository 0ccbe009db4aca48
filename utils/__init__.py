# utils/__init__.py
"""
Utilitários compartilhados: logging, auditoria, rate limit e timezone.
"""
