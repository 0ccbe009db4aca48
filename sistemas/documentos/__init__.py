# sistemas/documentos/__init__.py
"""
Registro de documentos com controle de prazos

Certidões, relatórios, ofícios e extinções acompanhados do cadastro até o
arquivamento, com responsável, prazo e status derivado (Urgente/Vencido).
"""
