# users/exceptions.py
"""
Exceções da gestão de usuários
"""


class UsuariosError(Exception):
    """Erro base do módulo"""
    pass


class UsuarioNaoEncontradoError(UsuariosError):
    pass


class UsuarioDuplicadoError(UsuariosError):
    """Username já cadastrado"""
    pass


class AutoExclusaoError(UsuariosError):
    """Administrador tentando excluir a própria conta"""
    pass


class UsuarioComDocumentosError(UsuariosError):
    """Usuário ainda tem documentos atribuídos"""

    def __init__(self, username: str, quantidade: int):
        self.username = username
        self.quantidade = quantidade
        super().__init__(
            f"Usuário '{username}' possui {quantidade} documento(s) atribuído(s). "
            "Reatribua ou exclua os documentos antes de excluir o usuário."
        )
