from contextlib import asynccontextmanager

from fastapi import FastAPI

from favzone.api.routes import router
from favzone.db.base import init_db
from favzone.log import setup_logging

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    init_db()
    yield

app = FastAPI(title="Favorable Zone Tracker", lifespan=lifespan)
app.include_router(router)

@app.get("/")
def home():
    return {"ok": True, "app": "Favorable Zone Tracker"}
