# users/__init__.py
"""
Gestão de usuários (administração).
"""
