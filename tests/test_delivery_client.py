"""
Delivery Client Tests
=====================
Outbound POST /builds and the best-effort failure policy.
The backend is replaced with httpx.MockTransport; nothing leaves the process.
"""
import json
import logging

import httpx
import pytest

from buildclerk.core.errors import DeliveryError
from buildclerk.models.build_report import BuildDetails, BuildReport, BuildStatus, Scm
from buildclerk.models.run import RunSnapshot
from buildclerk.services.delivery_client import BackendApiClient, NotificationService

SCM_VARS = {"GIT_LOCAL_BRANCH": "main", "GIT_COMMIT": "abc123"}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _backend(status_code=200, requests=None, error=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        if error is not None:
            raise error
        return httpx.Response(status_code)
    return httpx.MockTransport(handler)


def _report(status=BuildStatus.SUCCESS):
    return BuildReport(
        name="demo",
        url="job/demo/",
        details=BuildDetails(
            number=42,
            status=status,
            scm=Scm(branch="main", commit="abc123"),
            url="http://ci.example.com/job/demo/42/",
        ),
    )


def _run(result=None, building=True):
    return RunSnapshot(
        job_name="demo",
        job_url="job/demo/",
        number=42,
        result=result,
        building=building,
        url="job/demo/42/",
    )


# ===================================================================
# BackendApiClient
# ===================================================================
@pytest.mark.parametrize("server_url", ["http://backend:9090", "http://backend:9090/"])
def test_posts_report_to_builds_endpoint(server_url):
    requests = []
    client = BackendApiClient(server_url, transport=_backend(requests=requests))
    client.notify_build(_report())

    assert len(requests) == 1
    request = requests[0]
    assert request.method == "POST"
    assert str(request.url) == "http://backend:9090/builds"
    assert request.headers["content-type"] == "application/json"
    assert json.loads(request.content) == {
        "name": "demo",
        "url": "job/demo/",
        "details": {
            "number": 42,
            "status": "SUCCESS",
            "scm": {"branch": "main", "commit": "abc123"},
            "url": "http://ci.example.com/job/demo/42/",
        },
    }


def test_any_2xx_is_success():
    client = BackendApiClient("http://backend", transport=_backend(status_code=204))
    client.notify_build(_report())


def test_non_2xx_raises_delivery_error():
    client = BackendApiClient("http://backend", transport=_backend(status_code=500))
    with pytest.raises(DeliveryError) as exc_info:
        client.notify_build(_report())
    assert exc_info.value.status_code == 500


def test_transport_error_raises_delivery_error():
    client = BackendApiClient(
        "http://backend", transport=_backend(error=httpx.ConnectError("connection refused"))
    )
    with pytest.raises(DeliveryError) as exc_info:
        client.notify_build(_report())
    assert exc_info.value.status_code is None
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


# ===================================================================
# NotificationService
# ===================================================================
def test_send_notification_end_to_end(caplog):
    caplog.set_level(logging.INFO, logger="buildclerk")
    requests = []
    service = NotificationService(host_url="http://ci.example.com", transport=_backend(requests=requests))

    service.send_notification(_run(None, building=True), "http://backend", SCM_VARS)

    assert len(requests) == 1
    body = json.loads(requests[0].content)
    assert body["details"]["status"] == "SUCCESS"
    assert body["details"]["scm"] == {"branch": "main", "commit": "abc123"}
    assert body["details"]["url"] == "http://ci.example.com/job/demo/42/"
    assert "Build report sent" in caplog.text


def test_send_notification_failure_result():
    requests = []
    service = NotificationService(host_url="http://ci.example.com", transport=_backend(requests=requests))

    service.send_notification(_run("FAILURE", building=True), "http://backend", SCM_VARS)

    assert json.loads(requests[0].content)["details"]["status"] == "FAILED"


def test_backend_500_is_logged_not_raised(caplog):
    caplog.set_level(logging.INFO, logger="buildclerk")
    service = NotificationService(host_url="http://ci.example.com", transport=_backend(status_code=500))

    service.send_notification(_run("SUCCESS"), "http://backend", SCM_VARS)

    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(errors) == 1
    assert "Failed to send build report" in errors[0].getMessage()
    assert errors[0].exc_info is not None
    assert "Build report sent" not in caplog.text


def test_missing_scm_variable_sends_nothing(caplog):
    caplog.set_level(logging.INFO, logger="buildclerk")
    requests = []
    service = NotificationService(host_url="http://ci.example.com", transport=_backend(requests=requests))

    service.send_notification(_run("SUCCESS"), "http://backend", {"GIT_LOCAL_BRANCH": "main"})

    assert requests == []
    assert "GIT_COMMIT variable was null" in caplog.text


def test_unreachable_backend_is_logged_to_given_logger(caplog):
    build_log = logging.getLogger("buildclerk.tests.build_log")
    caplog.set_level(logging.INFO, logger="buildclerk.tests.build_log")
    service = NotificationService(
        host_url="", transport=_backend(error=httpx.ConnectError("connection refused"))
    )

    service.send_notification(_run("SUCCESS"), "http://backend", SCM_VARS, log=build_log)

    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert errors and errors[0].name == "buildclerk.tests.build_log"


def test_notify_delivers_prebuilt_report():
    requests = []
    service = NotificationService(transport=_backend(requests=requests))
    service.notify(_report(BuildStatus.FAILED), "http://backend")

    assert json.loads(requests[0].content)["details"]["status"] == "FAILED"


def test_notify_never_raises(caplog):
    service = NotificationService(transport=_backend(status_code=503))
    service.notify(_report(), "http://backend")
    assert "Failed to send build report" in caplog.text
