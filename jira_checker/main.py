import logging
import uuid
from pathlib import Path
from typing import Any, Dict, Iterator

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, Request, status
from starlette.middleware.base import BaseHTTPMiddleware

from .analyzers.scorer import summarize
from .config.config_loader import (
    load_runtime_config,
    reset_checker_settings,
    save_checker_settings,
)
from .config.settings import CheckerSettings, RuntimeConfig
from .services.checker_runner import CheckerRunner
from .utils.errors import ConfigError
from .utils.fields import extract_issue_key

# Load environment variables from jira_checker/.env
package_dir = Path(__file__).parent
load_dotenv(package_dir / ".env")

logger = logging.getLogger(__name__)

app = FastAPI(title="Jira Checker")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Add request ID to responses for tracing."""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


app.add_middleware(RequestIDMiddleware)


def get_runtime_config() -> RuntimeConfig:
    try:
        return load_runtime_config()
    except ConfigError as exc:
        logger.error(f"Failed to load config: {exc}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


def get_runner(runtime_config: RuntimeConfig = Depends(get_runtime_config)) -> Iterator[CheckerRunner]:
    runner = CheckerRunner(runtime_config)
    try:
        yield runner
    finally:
        runner.close()


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/issues/{issue_key}/validation")
def issue_validation(issue_key: str, runner: CheckerRunner = Depends(get_runner)) -> Dict[str, Any]:
    """Validate an issue and its epic members or sub-tasks."""
    key = extract_issue_key(issue_key)
    if not key:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid issue key: {issue_key}")

    report = runner.check(key)
    if report is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Issue {key} is not available")

    body = report.to_dict()
    body["summary"] = summarize(report.violations)
    return body


@app.get("/settings")
def get_settings(runtime_config: RuntimeConfig = Depends(get_runtime_config)) -> Dict[str, Any]:
    return runtime_config.checker.model_dump()


@app.put("/settings")
def update_settings(settings: CheckerSettings) -> Dict[str, Any]:
    try:
        save_checker_settings(settings)
    except (ConfigError, OSError) as exc:
        logger.error(f"Failed to save settings: {exc}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
    return settings.model_dump()


@app.post("/settings/reset")
def reset_settings() -> Dict[str, Any]:
    try:
        defaults = reset_checker_settings()
    except (ConfigError, OSError) as exc:
        logger.error(f"Failed to reset settings: {exc}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
    return defaults.model_dump()
