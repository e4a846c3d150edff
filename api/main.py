"""
kubegreen REST API - FastAPI trigger for namespace waste audits.
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware

from kubegreen import __version__
from kubegreen.audit import AuditFailedError, AuditOrchestrator
from kubegreen.config import AuditSettings
from kubegreen.connect import BaseCollector, DataRetrievalError, KubernetesCollector
from kubegreen.log import get_logger

logger = get_logger("api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build settings and the cluster collector once, close the collector on shutdown."""
    settings = AuditSettings.from_env()
    app.state.settings = settings
    app.state.collector = None
    app.state.collector_error = None
    try:
        app.state.collector = KubernetesCollector.from_settings(settings)
    except DataRetrievalError as e:
        logger.error("Could not configure Kubernetes client: %s", e)
        app.state.collector_error = str(e)

    yield

    if app.state.collector is not None:
        app.state.collector.close()
        app.state.collector = None


# FastAPI app
app = FastAPI(
    title="kubegreen API",
    description="Kubernetes Waste Auditor - Find unused requests and orphaned storage",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_settings(request: Request) -> AuditSettings:
    return request.app.state.settings


def get_collector(request: Request) -> BaseCollector:
    """The cluster collector built at startup."""
    collector = request.app.state.collector
    if collector is None:
        raise HTTPException(
            status_code=503,
            detail=f"Cluster unavailable: {request.app.state.collector_error}",
        )
    return collector


# Routes
@app.get("/")
async def root():
    """API root - health check and info."""
    return {
        "name": "kubegreen API",
        "version": __version__,
        "description": "Kubernetes Waste Auditor",
        "endpoints": {
            "audit": "/audit",
            "health": "/health",
        },
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}


@app.get("/audit")
def run_audit(
    namespace: Optional[str] = Query(None, description="Namespace to audit"),
    include_all: bool = Query(False, description="Include insignificant workloads"),
    settings: AuditSettings = Depends(get_settings),
    collector: BaseCollector = Depends(get_collector),
):
    """Run a waste audit and return the report."""
    orchestrator = AuditOrchestrator(collector, settings)
    try:
        report = orchestrator.run_audit(namespace)
    except AuditFailedError as e:
        raise HTTPException(status_code=503, detail=str(e))

    return report.to_dict(include_all=include_all)


# Run with: uvicorn api.main:app --reload
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
