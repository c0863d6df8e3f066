"""API Error Types

ClientError carries a use-case Error to the exception handler, which renders
it as {"error": {"code": ..., "message": ...}}.
"""

from fastapi import status
from libs.result import Error


class ClientError(Exception):
    def __init__(self, error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code

    def to_content(self) -> dict:
        return {"error": {"code": self.error.code, "message": self.error.message}}
