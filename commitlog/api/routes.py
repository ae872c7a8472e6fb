import logging

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from commitlog.api.models import (
    CommitResponse,
    ExportResponse,
    HealthResponse,
    HistoryRequest,
    HistoryResponse,
)
from commitlog.core.config import Config
from commitlog.core.errors import CommitLogError, NotARepository, SourceUnavailable
from commitlog.core.git_source import GitCommitSource
from commitlog.core.influx import get_client, write_commit_log
from commitlog.core.repo_locator import require_repository
from commitlog.history.walker import walk_history

logger = logging.getLogger("commitlog")

router = APIRouter()


@router.get("/")
async def read_root():
    return {"message": "Welcome to CommitLog API"}


@router.get("/health", response_model=HealthResponse)
async def health_check():
    return HealthResponse(
        status="healthy",
        service="CommitLog API",
        version="1.0.0",
    )


@router.get("/health/db")
async def db_health():
    """Check connectivity to InfluxDB using the client health endpoint."""
    try:
        client = get_client()
        health = client.health()
        status = getattr(health, "status", None) or (health.get("status") if isinstance(health, dict) else "unknown")
        message = getattr(health, "message", None) or (health.get("message") if isinstance(health, dict) else "")
        return {"status": status, "message": message}
    except Exception as e:
        return JSONResponse(status_code=503, content={"status": "unhealthy", "detail": str(e)})


def _walk_request(history_request: HistoryRequest):
    """Locate the repository and walk it. Domain errors propagate.

    Blocks on one git subprocess per call, so routes run it in the threadpool.
    """
    repo_root = require_repository(history_request.repo_path)
    source = GitCommitSource(repo_root)
    log = walk_history(
        source,
        start=history_request.start,
        limit=history_request.limit,
        separator=Config.MESSAGE_SEPARATOR,
    )
    return repo_root, log


def _error_response(e: CommitLogError) -> JSONResponse:
    if isinstance(e, NotARepository):
        return JSONResponse(status_code=404, content={"detail": str(e)})
    if isinstance(e, SourceUnavailable):
        return JSONResponse(status_code=502, content={"detail": str(e), "generation": e.generation})
    # parse errors and duplicate commits: the history itself is unusable
    return JSONResponse(
        status_code=422,
        content={"detail": str(e), "generation": e.generation, "error": type(e).__name__},
    )


async def _parse_history_request(request: Request):
    body = await request.json()
    logger.info(f"History request: {body}")
    try:
        return HistoryRequest(**body), None
    except ValidationError as e:
        messages = [err["msg"] for err in e.errors()]
        logger.warning(f"History validation failed: {messages}")
        return None, JSONResponse(status_code=400, content={"detail": messages})


@router.post("/history", response_model=HistoryResponse, status_code=200)
async def read_history(request: Request):
    """Walk a local repository's history and return it oldest-first."""
    history_request, error = await _parse_history_request(request)
    if error is not None:
        return error

    try:
        repo_root, log = await run_in_threadpool(_walk_request, history_request)
    except CommitLogError as e:
        logger.error(f"History walk failed for {history_request.repo_path}: {e}")
        return _error_response(e)

    return HistoryResponse(
        repo_root=str(repo_root),
        start=log.start,
        next_generation=log.next_generation,
        exhausted=log.exhausted,
        total_commits=len(log),
        commits=[CommitResponse.from_commit(c) for c in log],
    )


@router.post("/history/export", response_model=ExportResponse, status_code=200)
async def export_history(request: Request):
    """Walk a repository and write the complete log to InfluxDB."""
    history_request, error = await _parse_history_request(request)
    if error is not None:
        return error

    try:
        repo_root, log = await run_in_threadpool(_walk_request, history_request)
    except CommitLogError as e:
        logger.error(f"History walk failed for {history_request.repo_path}: {e}")
        return _error_response(e)

    try:
        written = await run_in_threadpool(write_commit_log, str(repo_root), log)
    except Exception as influx_err:
        logger.warning(f"InfluxDB write failed: {influx_err}")
        return JSONResponse(status_code=503, content={"detail": f"InfluxDB write failed: {influx_err}"})

    logger.info(f"Exported {written} commits from {repo_root}")
    return ExportResponse(repo_root=str(repo_root), written=written)
