"""
Build Run
=========
Read-only view of a just-finished CI run.

BuildRun is the only surface the report builder reads, so any host
integration just has to expose these six attributes. RunSnapshot is the
concrete pydantic version filled from a build hook payload.

Fields:
    job_name    — name of the job the run belongs to
    job_url     — job's short URL relative to the CI server root (e.g. job/demo/)
    number      — run number
    result      — host result code (SUCCESS, UNSTABLE, FAILURE, ABORTED, ...) or None
    building    — True while the host still flags the run as running
    url         — run URL relative to the CI server root (e.g. job/demo/42/)
"""
from typing import Optional, Protocol

from pydantic import BaseModel, ConfigDict


class BuildRun(Protocol):
    @property
    def job_name(self) -> str: ...

    @property
    def job_url(self) -> str: ...

    @property
    def number(self) -> int: ...

    @property
    def result(self) -> Optional[str]: ...

    @property
    def building(self) -> bool: ...

    @property
    def url(self) -> str: ...


class RunSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    job_name: str
    job_url: str
    number: int
    result: Optional[str] = None
    building: bool = False
    url: str
