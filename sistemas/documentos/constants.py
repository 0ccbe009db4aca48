# sistemas/documentos/constants.py
"""
Constantes do módulo de Documentos
"""


# Status persistido do documento
class StatusDocumento:
    EM_ANDAMENTO = "Em Andamento"
    CONCLUIDO = "Concluído"
    ARQUIVADO = "Arquivado"  # Marcador de arquivamento

    # Rótulos de exibição, calculados e nunca gravados
    URGENTE = "Urgente"
    VENCIDO = "Vencido"


# Status aceitos na criação/edição via API
STATUS_EDITAVEIS = (StatusDocumento.EM_ANDAMENTO, StatusDocumento.CONCLUIDO)


class TipoDocumento:
    CERTIDAO = "Certidão"
    RELATORIO = "Relatório"
    OFICIO = "Ofício"
    EXTINCAO = "Extinção"


TIPOS_VALIDOS = (
    TipoDocumento.CERTIDAO,
    TipoDocumento.RELATORIO,
    TipoDocumento.OFICIO,
    TipoDocumento.EXTINCAO,
)

# Tipo de documento -> chave no detalhamento por tipo
CHAVES_POR_TIPO = {
    TipoDocumento.CERTIDAO: "certidoes",
    TipoDocumento.RELATORIO: "relatorios",
    TipoDocumento.OFICIO: "oficios",
    TipoDocumento.EXTINCAO: "extincoes",
}

NAO_ATRIBUIDO = "Não atribuído"
