"""
Delivery Client
===============
Sends build reports to the backend with a single blocking POST.

Failure Policy:
    - Exactly one attempt per report: no retry, no queue, no backoff
    - Transport errors, non-2xx responses and serialization errors all
      surface from BackendApiClient as DeliveryError
    - NotificationService is the outermost boundary: it catches every
      failure (including MissingFieldError from the report builder), logs
      it with the full traceback and carries on
    - Nothing here ever raises into the host build
"""
import logging
from typing import Mapping, Optional

import httpx

from buildclerk.core.config import JENKINS_URL
from buildclerk.core.constants import BUILDS_PATH
from buildclerk.core.errors import DeliveryError
from buildclerk.models.build_report import BuildReport
from buildclerk.models.run import BuildRun
from buildclerk.services.report_builder import ReportBuilder

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Backend API
# ---------------------------------------------------------------------------
class BackendApiClient:
    """Thin client for the backend's build report endpoint."""

    def __init__(self, server_url: str, transport: Optional[httpx.BaseTransport] = None) -> None:
        self.server_url = server_url
        self.transport = transport
        self.headers = {
            "Content-Type": "application/json",
            "User-Agent": "buildclerk-notifier",
        }

    def builds_url(self) -> str:
        return f"{self.server_url.rstrip('/')}/{BUILDS_PATH}"

    def notify_build(self, report: BuildReport) -> None:
        """
        POST the report to <server_url>/builds.

        Raises
        ------
        DeliveryError
            On serialization failure, transport failure or a non-2xx status.
        """
        try:
            body = report.model_dump(mode="json")
        except Exception as e:
            raise DeliveryError(f"Could not serialize build report: {e}") from e

        url = self.builds_url()
        try:
            with httpx.Client(headers=self.headers, transport=self.transport) as client:
                response = client.post(url, json=body)
                response.raise_for_status()
        except httpx.HTTPStatusError as http_err:
            status_code = http_err.response.status_code
            raise DeliveryError(
                f"Backend rejected build report - HTTP {status_code}",
                status_code=status_code,
            ) from http_err
        except httpx.HTTPError as e:
            raise DeliveryError(f"Could not reach backend at {url}: {e}") from e


# ---------------------------------------------------------------------------
# Notification boundary
# ---------------------------------------------------------------------------
class NotificationService:
    """
    Best-effort build notifications.

    The host calls send_notification once per finished build. The outcome
    only ever shows up in the log.
    """

    def __init__(
        self,
        host_url: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.host_url = host_url if host_url is not None else JENKINS_URL
        self.transport = transport

    def send_notification(
        self,
        run: BuildRun,
        server_url: str,
        scm_vars: Mapping[str, Optional[str]],
        log: Optional[logging.Logger] = None,
    ) -> None:
        """
        Build a report for the run and send it to the backend at server_url.

        Any failure is logged to `log` (the module logger by default) and
        swallowed.
        """
        log = log or logger
        try:
            report = ReportBuilder(self.host_url, log=log).build(run, scm_vars)
            self._deliver(report, server_url, log)
        except Exception as e:
            log.error("Failed to send build report: %s", e, exc_info=True)

    def notify(
        self,
        report: BuildReport,
        endpoint_url: str,
        log: Optional[logging.Logger] = None,
    ) -> None:
        """Deliver an already-built report once, logging rather than raising on failure."""
        log = log or logger
        try:
            self._deliver(report, endpoint_url, log)
        except Exception as e:
            log.error("Failed to send build report: %s", e, exc_info=True)

    def _deliver(self, report: BuildReport, server_url: str, log: logging.Logger) -> None:
        log.info("Sending build report to %s:\n%s", server_url, report.model_dump_json(indent=2))
        BackendApiClient(server_url, transport=self.transport).notify_build(report)
        log.info("Build report sent")
