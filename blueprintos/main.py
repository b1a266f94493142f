import re

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from blueprintos.config import settings
from blueprintos.api.v1.api import api_router
from blueprintos.middleware.request_logging import RequestLoggingMiddleware
from blueprintos.middleware.metrics import PrometheusMiddleware, metrics_endpoint, set_app_info
from blueprintos.middleware.workspace_host import WorkspaceHostMiddleware
from blueprintos.logging_config import setup_logging

# ── Initialize structured logging ──
setup_logging()

app = FastAPI(
    title=settings.APP_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json"
)

# Set all CORS enabled origins
cors_origins = ["http://localhost:3000", "http://localhost:5173", "http://localhost:8000"]
if settings.BACKEND_CORS_ORIGINS:
    cors_origins.extend([origin.strip() for origin in settings.BACKEND_CORS_ORIGINS.split(",") if origin.strip()])

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    # workspace subdomains are open-ended
    allow_origin_regex=r"https://([a-z0-9-]+\.)?" + re.escape(settings.ROOT_DOMAIN),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request logging middleware – request ID, timing, context
app.add_middleware(RequestLoggingMiddleware)

# Prometheus metrics middleware – request count, latency, in-progress
app.add_middleware(PrometheusMiddleware)

# Workspace host middleware – normalized Host for resolution + log context
app.add_middleware(WorkspaceHostMiddleware)

app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    return {"message": f"Welcome to {settings.APP_NAME} API", "docs": "/docs"}


@app.get("/health")
def health_check():
    return {"status": "ok", "env": settings.APP_ENV}


# Prometheus metrics endpoint
app.add_route("/metrics", metrics_endpoint)
set_app_info(version="1.0.0", env=settings.APP_ENV)
