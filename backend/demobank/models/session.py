from sqlalchemy import Column, String, DateTime, ForeignKey
from demobank.models.user import Base
from demobank.utils import utcnow

class SessionToken(Base):
    __tablename__ = "sessions"
    token = Column(String, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
