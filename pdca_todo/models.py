from sqlalchemy.orm import declarative_base
from sqlalchemy import Column, DateTime, String, Text
from datetime import datetime

Base = declarative_base()


class Snapshot(Base):
    __tablename__ = "snapshots"
    key = Column(String, primary_key=True)                 # e.g. "pdca-todo-data"
    payload = Column(Text, nullable=False)                 # AppSnapshot as JSON
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
