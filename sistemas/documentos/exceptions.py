# sistemas/documentos/exceptions.py
"""
Exceções específicas do módulo de Documentos
"""


class DocumentosError(Exception):
    """Erro base do módulo"""
    pass


class DocumentoNaoEncontradoError(DocumentosError):
    """Documento não existe"""
    pass


class ProcessoDuplicadoError(DocumentosError):
    """Já existe documento com o mesmo número de processo"""
    pass


class ResponsavelInvalidoError(DocumentosError):
    """Usuário informado como responsável não existe"""
    pass


class TransicaoInvalidaError(DocumentosError):
    """Operação incompatível com a situação atual do documento"""
    pass
