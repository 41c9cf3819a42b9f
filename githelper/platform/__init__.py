"""Platform abstraction layer: processes and HTTP."""

from .http import (
    HttpClient,
    HttpError,
    MockHttpClient,
    RealHttpClient,
)
from .process import (
    MockRunner,
    ProcessError,
    ProcessRunner,
    SubprocessRunner,
    run,
    run_live,
    which,
)

__all__ = [
    # http
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
    # process
    "MockRunner",
    "ProcessError",
    "ProcessRunner",
    "SubprocessRunner",
    "run",
    "run_live",
    "which",
]
