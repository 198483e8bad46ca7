from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import declarative_base
from demobank.utils import utcnow

Base = declarative_base()

class User(Base):
    __tablename__ = "users"
    id = Column(String, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    # Plaintext on purpose: demo data only, never a real credential store
    password = Column(String, nullable=False)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
