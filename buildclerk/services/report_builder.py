"""
Report Builder
==============
Turns the loosely-typed state of a finished CI run into a BuildReport.

Status Inference:
    - A host result of FAILURE or UNSTABLE is reported as FAILED
    - Any other non-null result (SUCCESS, ABORTED, NOT_BUILT, or a value we
      have never seen) is reported as SUCCESS
    - A null result on a run that is still building is reported as SUCCESS.
      Some hosts fire the end-of-build hook before the terminal result is
      attached to the run.
    - A null result on a run that has stopped building is reported as FAILED

SCM Details:
    GIT_LOCAL_BRANCH and GIT_COMMIT must both be present in the SCM
    variables. A missing one raises MissingFieldError and no report is built.

Build URL:
    The CI server base URL is passed in explicitly. It is trimmed and given
    exactly one trailing slash, then the run's relative URL is appended.
    A blank or unset base URL leaves the build URL relative.
"""
import logging
from typing import Mapping, Optional

from buildclerk.core.constants import FAILURE_RESULTS, GIT_COMMIT, GIT_LOCAL_BRANCH
from buildclerk.core.errors import MissingFieldError
from buildclerk.models.build_report import BuildDetails, BuildReport, BuildStatus, Scm
from buildclerk.models.run import BuildRun

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Status inference
# ---------------------------------------------------------------------------
def convert_result(result: Optional[str]) -> BuildStatus:
    """
    Conservatively convert a host result code to a BuildStatus.

    Only an explicit failure result maps to FAILED.
    """
    if result in FAILURE_RESULTS:
        return BuildStatus.FAILED
    # Unrecognised results count as success too.
    # TODO: decide whether unknown result codes should fail safe instead.
    return BuildStatus.SUCCESS


def determine_build_status(run: BuildRun, log: Optional[logging.Logger] = None) -> BuildStatus:
    """
    Work out the status to report for a run whose result may still be null.

    Parameters
    ----------
    run : BuildRun
        The run that just finished.
    log : logging.Logger, optional
        Where to record how a null result was interpreted.

    Returns
    -------
    BuildStatus
        SUCCESS or FAILED, never anything else.
    """
    log = log or logger
    if run.result is not None:
        return convert_result(run.result)

    if run.building:
        log.info("Run result was null, but run is building - interpreting as success")
        return BuildStatus.SUCCESS

    log.info("Run result was null, but run is not building - interpreting as failure")
    return BuildStatus.FAILED


# ---------------------------------------------------------------------------
# SCM and URL helpers
# ---------------------------------------------------------------------------
def fetch_scm_details(scm_vars: Mapping[str, Optional[str]]) -> Scm:
    """Read branch and commit from the SCM variables, failing if either is missing."""
    branch = scm_vars.get(GIT_LOCAL_BRANCH)
    if branch is None:
        raise MissingFieldError(GIT_LOCAL_BRANCH)

    commit = scm_vars.get(GIT_COMMIT)
    if commit is None:
        raise MissingFieldError(GIT_COMMIT)

    return Scm(branch=branch, commit=commit)


def normalize_base_url(base_url: Optional[str]) -> str:
    """Return the CI server base URL with one trailing slash, or "" if blank."""
    if not base_url or not base_url.strip():
        return ""
    base_url = base_url.strip()
    if base_url.endswith("/"):
        return base_url
    return base_url + "/"


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------
class ReportBuilder:
    """
    Builds immutable BuildReport records for finished runs.
    Reads host state only; has no other side effects.
    """

    def __init__(self, base_url: Optional[str] = None, log: Optional[logging.Logger] = None) -> None:
        self.base_url = normalize_base_url(base_url)
        self.log = log or logger

    def build(self, run: BuildRun, scm_vars: Mapping[str, Optional[str]]) -> BuildReport:
        """
        Build the report for a run.

        Raises
        ------
        MissingFieldError
            If GIT_LOCAL_BRANCH or GIT_COMMIT is absent from scm_vars.
        """
        status = determine_build_status(run, self.log)
        scm = fetch_scm_details(scm_vars)

        return BuildReport(
            name=run.job_name,
            url=run.job_url,
            details=BuildDetails(
                number=run.number,
                status=status,
                scm=scm,
                url=self.base_url + run.url,
            ),
        )
