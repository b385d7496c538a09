# pcforge/main.py

import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from .config import settings
from .database import create_db_and_tables
from .seed_data import seed_master_data

from .api import catalog as catalog_api
from .api import customers as customers_api
from .api import orders as orders_api
from .api import vendor as vendor_api
from .api import admin as admin_api
from .api import payments as payments_api

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("pcforge")

app = FastAPI(title="PCForge custom PC build marketplace")

# Include API routers
app.include_router(catalog_api.router)
app.include_router(orders_api.router)
app.include_router(customers_api.router)
app.include_router(vendor_api.router)
app.include_router(admin_api.router)
app.include_router(payments_api.router)

# Stored invoices, served under PUBLIC_BASE_URL
app.mount("/files", StaticFiles(directory=settings.storage_dir, check_dir=False), name="files")


@app.on_event("startup")
async def startup_event():
    Path(settings.storage_dir).mkdir(parents=True, exist_ok=True)
    create_db_and_tables()
    seed_master_data()
    logger.info("Database ready at %s", settings.database_url)


@app.get("/api/health")
def health_check():
    return {"status": "healthy", "service": "pcforge"}
