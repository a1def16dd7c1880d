from sqlalchemy.orm import sessionmaker

from lnsim.db.models import Base, ChartRecord, NetworkRecord
from lnsim.db.session import engine as default_engine
from lnsim.ir.chart import Chart, NetworksFile
from lnsim.ir.network import Network


class NetworkRepository:
    """
    Stores the whole NetworksFile: one row per network (kept in order)
    and one row per chart, each holding the model as JSON.
    """

    def __init__(self, engine=None):
        self.engine = engine if engine is not None else default_engine
        self.session_factory = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

    def create_tables(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    def load(self) -> NetworksFile:
        with self.session_factory() as session:
            network_rows = session.query(NetworkRecord).order_by(NetworkRecord.position).all()
            chart_rows = session.query(ChartRecord).all()

            networks = [Network.model_validate_json(row.payload) for row in network_rows]
            charts = {row.network_id: Chart.model_validate_json(row.payload) for row in chart_rows}

        print(f"[DB] Loaded {len(networks)} network(s), {len(charts)} chart(s)")
        return NetworksFile(networks=networks, charts=charts)

    def save(self, data: NetworksFile) -> None:
        """Replace everything stored with `data` in a single transaction"""
        network_ids = {n.id for n in data.networks}

        with self.session_factory() as session, session.begin():
            session.query(ChartRecord).delete()
            session.query(NetworkRecord).delete()

            for position, network in enumerate(data.networks):
                session.add(
                    NetworkRecord(
                        id=network.id,
                        position=position,
                        name=network.name,
                        payload=network.model_dump_json(),
                    )
                )
            session.flush()

            for network_id, chart in data.charts.items():
                if network_id not in network_ids:
                    continue
                session.add(
                    ChartRecord(
                        network_id=network_id,
                        payload=chart.model_dump_json(by_alias=True),
                    )
                )
