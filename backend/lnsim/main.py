import time
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import OperationalError

from lnsim import config
from lnsim.api.routes import router
from lnsim.db.repository import NetworkRepository
from lnsim.services import HttpReadinessProbe, StoreInjections
from lnsim.store import DesignerStore


def create_app(store: Optional[DesignerStore] = None) -> FastAPI:
    app = FastAPI(
        title="Lightning Network Designer",
        version="0.1.0",
    )

    if store is None:
        store = DesignerStore(
            injections=StoreInjections(probe=HttpReadinessProbe()),
            repository=NetworkRepository(),
        )
    app.state.store = store

    # Middleware FIRST
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routes AFTER middleware
    app.include_router(router)

    @app.on_event("startup")
    def startup():
        repository = store.repository
        if repository is None:
            print("[DB] No repository configured, running without persistence")
            return

        for attempt in range(config.DB_RETRIES):
            try:
                repository.create_tables()
                store.load()
                print("[DB] Database connected")
                return
            except OperationalError:
                print(f"[DB] Waiting for database... ({attempt + 1}/{config.DB_RETRIES})")
                time.sleep(config.DB_RETRY_DELAY)

        # do not crash the app
        store.repository = None
        print("[DB] Database not ready, running without persistence")

    return app


app = create_app()
