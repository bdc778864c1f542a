from sqlalchemy import Column, DateTime, String
from todoapp.database import Base
from todoapp.models.task import new_id, utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String, unique=True, nullable=False, index=True)
    password = Column(String, nullable=False)
    name = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
