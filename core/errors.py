"""Error taxonomy shared by the pipeline and the HTTP handlers."""

from __future__ import annotations


class CheckCarError(Exception):
    """Base class for all expected failures."""


class ConfigurationMissing(CheckCarError):
    """A required credential is not configured."""


class InvalidRequest(CheckCarError):
    """The incoming request body is unusable."""


class UpstreamFailure(CheckCarError):
    """The Gemini API answered with a non-success status or could not be reached."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"Upstream returned {status_code}")
        self.status_code = status_code
        self.body = body


class UpstreamShapeError(CheckCarError):
    """The Gemini API answered 2xx but without the expected reply structure."""

    def __init__(self, message: str, payload: object = None) -> None:
        super().__init__(message)
        self.payload = payload


class MalformedReply(CheckCarError):
    """No usable JSON object could be recovered from the model reply."""

    def __init__(self, message: str, raw_text: str) -> None:
        super().__init__(message)
        self.raw_text = raw_text


class DomainRejection(CheckCarError):
    """The model parsed fine but reported that the input was unusable."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
