import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from models.audit_logs import AuditLog as AuditLogModel

logger = logging.getLogger(__name__)

AUDIT_CREATE = "CREATE"
AUDIT_UPDATE = "UPDATE"
AUDIT_DELETE = "DELETE"


def write_audit_log(
    db: Session,
    user_id: str,
    action: str,
    entity_type: str,
    entity_id: Optional[Any] = None,
    details: Optional[Dict[str, Any]] = None,
) -> AuditLogModel:
    """감사 로그 한 건 추가 (commit은 호출한 쪽 트랜잭션에서)"""
    entry = AuditLogModel(
        user_id=str(user_id),
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id) if entity_id is not None else None,
        details=details,
    )
    db.add(entry)
    logger.info(f"audit {action} {entity_type} id={entity_id} by user={user_id}")
    return entry
