"""
Build Report Model
==================
Pydantic models for the record sent to the backend when a build finishes.
This is the contract between the report builder and the delivery client,
and its JSON form is the body of POST /builds.

Fields:
    name            — job name
    url             — job's canonical (relative) URL
    details.number  — build number, ascending per job
    details.status  — SUCCESS or FAILED, never anything else
    details.scm     — branch and commit of the checked-out revision
    details.url     — absolute URL to this build's page on the CI server

All models are frozen: a report is built once per build completion and
discarded after the delivery attempt.
"""
from enum import Enum

from pydantic import BaseModel, ConfigDict


class BuildStatus(str, Enum):
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class Scm(BaseModel):
    model_config = ConfigDict(frozen=True)

    branch: str
    commit: str


class BuildDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: int
    status: BuildStatus
    scm: Scm
    url: str


class BuildReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    url: str
    details: BuildDetails
