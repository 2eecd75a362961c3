from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, JSON
from database.db import Base

# ✅ 감사 로그 테이블 (누가 / 무엇을 / 어떤 엔티티에 했는지)
class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)          # 로그 고유 ID (PK)
    user_id = Column(String(64), nullable=False)                # 작업 수행 사용자 ID
    action = Column(String(20), nullable=False)                 # CREATE / READ / UPDATE / DELETE
    entity_type = Column(String(50), nullable=False)            # 대상 엔티티 종류 (예: Score)
    entity_id = Column(String(64))                              # 대상 엔티티 ID (일괄 작업은 NULL)
    details = Column(JSON)                                      # 상세 내용
    timestamp = Column(DateTime(timezone=True), nullable=False,
                       default=lambda: datetime.now(timezone.utc))
