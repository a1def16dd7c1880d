from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class NetworkRecord(Base):
    __tablename__ = "networks"

    id = Column(Integer, primary_key=True)
    position = Column(Integer, nullable=False)
    name = Column(String(255), nullable=False)
    payload = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class ChartRecord(Base):
    __tablename__ = "charts"

    network_id = Column(Integer, ForeignKey("networks.id", ondelete="CASCADE"), primary_key=True)
    payload = Column(Text, nullable=False)
