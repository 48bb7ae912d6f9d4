# file: errors.py

from fastapi import status


class QuorumFlowError(Exception):
    """Error surfaced to API callers as ``{"code": ..., "message": ...}``."""

    code = "internal"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class UnauthenticatedError(QuorumFlowError):
    code = "unauthenticated"
    status_code = status.HTTP_401_UNAUTHORIZED


class InternalError(QuorumFlowError):
    code = "internal"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
