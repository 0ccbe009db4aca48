# utils/audit.py
"""
SECURITY: Audit Logging para eventos sensíveis.

Eventos registrados:
- AUTH_LOGIN_SUCCESS/FAILURE, AUTH_LOGOUT, AUTH_PASSWORD_CHANGE
- USER_CREATED/UPDATED/DELETED, USER_PASSWORD_RESET
- DOCUMENT_DELETED/ARCHIVED/RESTORED
- SETTINGS_CHANGED
- DATA_EXPORT: exportações JSON/CSV/PDF

Os registros saem pelo logger structlog "security.audit", com IP, caminho e
request_id já resolvidos.
"""

from enum import Enum
from typing import Optional, Dict, Any

from fastapi import Request

from middleware.request_id import get_request_id
from utils.logging_config import get_logger

audit_logger = get_logger("security.audit")


class AuditEvent(str, Enum):
    """Tipos de eventos de auditoria"""
    # Autenticação
    AUTH_LOGIN_SUCCESS = "AUTH_LOGIN_SUCCESS"
    AUTH_LOGIN_FAILURE = "AUTH_LOGIN_FAILURE"
    AUTH_LOGOUT = "AUTH_LOGOUT"
    AUTH_PASSWORD_CHANGE = "AUTH_PASSWORD_CHANGE"

    # Gestão de usuários
    USER_CREATED = "USER_CREATED"
    USER_UPDATED = "USER_UPDATED"
    USER_DELETED = "USER_DELETED"
    USER_PASSWORD_RESET = "USER_PASSWORD_RESET"

    # Documentos
    DOCUMENT_DELETED = "DOCUMENT_DELETED"
    DOCUMENT_ARCHIVED = "DOCUMENT_ARCHIVED"
    DOCUMENT_RESTORED = "DOCUMENT_RESTORED"

    # Administração
    SETTINGS_CHANGED = "SETTINGS_CHANGED"
    SNAPSHOTS_REFRESHED = "SNAPSHOTS_REFRESHED"

    # Dados
    DATA_EXPORT = "DATA_EXPORT"


SENSITIVE_KEYS = {
    "password", "senha", "secret", "token", "authorization", "hashed_password"
}


def get_client_ip(request: Optional[Request]) -> str:
    """
    SECURITY: Extrai IP real do cliente considerando proxies.
    """
    if not request:
        return "unknown"

    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    if request.client:
        return request.client.host

    return "unknown"


def mask_sensitive_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    SECURITY: Mascara dados sensíveis antes de logar.
    """
    masked = {}
    for key, value in data.items():
        if any(s in key.lower() for s in SENSITIVE_KEYS):
            masked[key] = "***MASKED***"
        elif isinstance(value, dict):
            masked[key] = mask_sensitive_data(value)
        else:
            masked[key] = value
    return masked


def log_audit_event(
    event: AuditEvent,
    user_id: Optional[int] = None,
    username: Optional[str] = None,
    request: Optional[Request] = None,
    details: Optional[Dict[str, Any]] = None,
    success: bool = True,
    severity: str = "INFO"
):
    """
    SECURITY: Registra evento de auditoria.

    Example:
        log_audit_event(
            AuditEvent.AUTH_LOGIN_SUCCESS,
            user_id=user.id,
            username=user.username,
            request=request,
        )
    """
    request_id = get_request_id()
    if not request_id and request:
        request_id = getattr(request.state, "request_id", None)

    record = {
        "audit_event": event.value,
        "success": success,
        "user_id": user_id,
        "username": username,
        "ip_address": get_client_ip(request),
        "path": str(request.url.path) if request else "unknown",
        "method": request.method if request else "unknown",
        "audit_request_id": request_id,
    }
    if details:
        record["details"] = mask_sensitive_data(details)

    if severity == "WARNING":
        audit_logger.warning("audit", **record)
    elif severity == "ERROR":
        audit_logger.error("audit", **record)
    else:
        audit_logger.info("audit", **record)


# ============================================
# Funções de conveniência para eventos comuns
# ============================================

def log_login_success(user_id: int, username: str, request: Request):
    """Registra login bem sucedido"""
    log_audit_event(AuditEvent.AUTH_LOGIN_SUCCESS, user_id=user_id, username=username, request=request)


def log_login_failure(username: str, request: Request, reason: str = "invalid_credentials"):
    """Registra falha de login"""
    log_audit_event(
        AuditEvent.AUTH_LOGIN_FAILURE,
        username=username,
        request=request,
        details={"reason": reason},
        success=False,
        severity="WARNING"
    )


def log_logout(user_id: int, username: str, request: Request):
    log_audit_event(AuditEvent.AUTH_LOGOUT, user_id=user_id, username=username, request=request)


def log_password_change(user_id: int, username: str, request: Request):
    log_audit_event(AuditEvent.AUTH_PASSWORD_CHANGE, user_id=user_id, username=username, request=request)


def log_user_created(created_user_id: int, created_username: str, created_by: str, request: Request):
    """Registra criação de usuário"""
    log_audit_event(
        AuditEvent.USER_CREATED,
        user_id=created_user_id,
        username=created_username,
        request=request,
        details={"created_by": created_by}
    )


def log_user_deleted(deleted_user_id: int, deleted_username: str, deleted_by: str, request: Request):
    """Registra exclusão de usuário"""
    log_audit_event(
        AuditEvent.USER_DELETED,
        user_id=deleted_user_id,
        username=deleted_username,
        request=request,
        details={"deleted_by": deleted_by},
        severity="WARNING"
    )


def log_document_event(
    event: AuditEvent,
    documento_id: int,
    process_number: str,
    user_id: int,
    username: str,
    request: Request
):
    """Registra exclusão, arquivamento ou restauração de documento"""
    log_audit_event(
        event,
        user_id=user_id,
        username=username,
        request=request,
        details={"documento_id": documento_id, "process_number": process_number},
        severity="WARNING" if event == AuditEvent.DOCUMENT_DELETED else "INFO"
    )


def log_admin_action(event: AuditEvent, user_id: int, username: str, request: Request, details: Dict[str, Any]):
    """Registra ação administrativa (configurações, snapshots)"""
    log_audit_event(event, user_id=user_id, username=username, request=request, details=details)


def log_data_export(
    user_id: int,
    username: str,
    request: Request,
    export_type: str,
    record_count: int,
    format: str = "unknown"
):
    """
    Registra exportação de dados para compliance.

    Args:
        export_type: Tipo de dados exportados (documentos, produtividade)
        record_count: Quantidade de registros
        format: Formato da exportação (json, csv, pdf)
    """
    log_audit_event(
        AuditEvent.DATA_EXPORT,
        user_id=user_id,
        username=username,
        request=request,
        details={
            "export_type": export_type,
            "record_count": record_count,
            "format": format
        }
    )
