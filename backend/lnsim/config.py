import os
from dotenv import load_dotenv

# Load .env from project root
load_dotenv()

DATABASE_URL = os.getenv("LNSIM_DATABASE_URL", "sqlite:///./lnsim.db")
DB_RETRIES = int(os.getenv("LNSIM_DB_RETRIES", "5"))
DB_RETRY_DELAY = float(os.getenv("LNSIM_DB_RETRY_DELAY", "2"))

# Chart viewport
ZOOM_STEP = float(os.getenv("LNSIM_ZOOM_STEP", "0.1"))
MIN_SCALE = float(os.getenv("LNSIM_MIN_SCALE", "0.1"))
MAX_SCALE = float(os.getenv("LNSIM_MAX_SCALE", "3.0"))

# Chart grid
NODE_SPACING = int(os.getenv("LNSIM_NODE_SPACING", "250"))
LEFT_MARGIN = int(os.getenv("LNSIM_LEFT_MARGIN", "50"))
LIGHTNING_ROW_Y = int(os.getenv("LNSIM_LIGHTNING_ROW_Y", "50"))
BITCOIN_ROW_Y = int(os.getenv("LNSIM_BITCOIN_ROW_Y", "400"))

# Readiness probes
PROBE_TIMEOUT = float(os.getenv("LNSIM_PROBE_TIMEOUT", "5"))
PROBE_RETRIES = int(os.getenv("LNSIM_PROBE_RETRIES", "6"))
PROBE_DELAY = float(os.getenv("LNSIM_PROBE_DELAY", "5"))

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("LNSIM_CORS_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]
