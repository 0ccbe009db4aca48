"""
Setup script para instalação do Controle de Prazos.

Este arquivo permite instalar o projeto em modo editable para desenvolvimento:
    pip install -e .[test]

Isso adiciona o projeto ao PYTHONPATH e permite imports como:
    from sistemas.relatorios.agregacao import calcular_relatorio_sistema
"""

from setuptools import setup, find_packages

setup(
    name="controle-prazos",
    version="1.0.0",
    description="Controle de Prazos - Registro de documentos e relatórios de produtividade",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["config", "main"],
    python_requires=">=3.10",
    install_requires=[
        "fastapi",
        "uvicorn",
        "SQLAlchemy>=2.0",
        "pydantic>=2",
        "python-jose[cryptography]",
        "bcrypt",
        "python-dotenv",
        "pytz",
        "structlog",
        "slowapi",
        "python-multipart",
        "reportlab",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
            "PyMuPDF",
        ],
    },
)
