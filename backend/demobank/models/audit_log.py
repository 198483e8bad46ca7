from sqlalchemy import Column, Integer, String, DateTime
from demobank.models.user import Base
from demobank.utils import utcnow

class AuditLog(Base):
    __tablename__ = "audit_logs"
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(String, nullable=True)
    action = Column(String, nullable=False)
    details = Column(String, nullable=True)
    timestamp = Column(DateTime, default=utcnow, nullable=False)
