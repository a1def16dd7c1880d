from lnsim.db.models import Base, ChartRecord, NetworkRecord
from lnsim.db.repository import NetworkRepository
from lnsim.db.session import engine, make_engine

__all__ = ["Base", "ChartRecord", "NetworkRecord", "NetworkRepository", "engine", "make_engine"]
