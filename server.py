# server.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kafka_records.api import records as records_router
from kafka_records.core.config import settings
from kafka_records.core.errors import install_exception_handlers
from kafka_records.infra.kafka.clients import KafkaClientFactory
from kafka_records.services.record_reader import RecordReader
from kafka_records.services.record_writer import RecordWriter

logger = logging.getLogger(__name__)


# Lifespan handler replaces @app.on_event("startup"/"shutdown")
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Clients are created per request; only the factory and services are shared.
    factory = KafkaClientFactory(settings)
    app.state.record_reader = RecordReader(factory, poll_timeout_ms=settings.poll_timeout_ms)
    app.state.record_writer = RecordWriter(factory, close_timeout_sec=settings.producer_close_timeout_sec)
    logger.info("Records API ready (bootstrap=%s)", settings.kafka_bootstrap)
    yield


app = FastAPI(
    title="Kafka Records API",
    version="1.0.0",
    lifespan=lifespan,
    openapi_url="/api/v1/openapi.json",
    docs_url="/api/v1/docs",
    redoc_url="/api/v1/redoc",
)

# --- CORS: allow web-ui during development (configurable via settings.cors_allow_origins) ---
allow_origins = settings.cors_allow_origins or [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

install_exception_handlers(app)

app.include_router(records_router.router, prefix="/api/v1")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("server:app", host="0.0.0.0", port=8000, reload=True)
