"""
POST /hooks/build-finished
==========================
Entry point for the CI host's end-of-build hook.

The host posts the facts of the finished run plus its SCM variables.
The notification is sent synchronously before responding, but its outcome
never changes the response: 202 means the hook was processed, not that
the backend accepted the report.

Backend URL:
    server_url in the body, falling back to BUILDCLERK_SERVER_URL.
    If neither is set the hook is rejected with 400 and nothing is sent.
"""
import logging
from typing import Dict, Optional

from fastapi import APIRouter, HTTPException

from buildclerk.core import config
from buildclerk.models.run import RunSnapshot
from buildclerk.services.delivery_client import NotificationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/hooks", tags=["Hooks"])


class BuildFinishedEvent(RunSnapshot):
    scm_vars: Dict[str, Optional[str]] = {}
    server_url: Optional[str] = None
    host_url: Optional[str] = None


@router.post("/build-finished", status_code=202)
def build_finished(event: BuildFinishedEvent):
    server_url = event.server_url or config.BUILDCLERK_SERVER_URL
    if not server_url:
        raise HTTPException(status_code=400, detail="No backend server URL configured")

    logger.info("Build finished: %s #%d", event.job_name, event.number)
    service = NotificationService(host_url=event.host_url)
    service.send_notification(event, server_url, event.scm_vars)
    return {"status": "processed"}
