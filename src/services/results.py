"""
Outcome envelope returned by the verification pipeline and status updater.

Handled outcomes (not found, no match, no-op) are values, not exceptions;
only genuine faults raise, and they are converted to FAULT at the service
boundary.
"""

from enum import Enum
from typing import Any
from fastapi import status
from pydantic import BaseModel, Field


class Outcome(str, Enum):
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    NO_MATCH = "no_match"
    NO_TEXT = "no_text"
    NO_OP = "no_op"
    FAULT = "fault"


STATUS_CODES = {
    Outcome.SUCCESS: status.HTTP_200_OK,
    Outcome.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    Outcome.NO_MATCH: status.HTTP_400_BAD_REQUEST,
    Outcome.NO_TEXT: status.HTTP_400_BAD_REQUEST,
    Outcome.NO_OP: status.HTTP_304_NOT_MODIFIED,
    Outcome.FAULT: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ServiceResult(BaseModel):
    outcome: Outcome = Field(exclude=True)
    message: str
    data: Any = None

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.outcome]

    @property
    def success(self) -> bool:
        return self.outcome == Outcome.SUCCESS

    def to_response(self) -> dict:
        """Caller-facing shape: {statusCode, success, message, data}"""
        body = {
            "statusCode": self.status_code,
            "success": self.success,
            "message": self.message,
        }
        if self.data is not None:
            body["data"] = self.data.model_dump(mode="json") if isinstance(self.data, BaseModel) else self.data
        return body

    @classmethod
    def ok(cls, message: str, data: Any = None) -> "ServiceResult":
        return cls(outcome=Outcome.SUCCESS, message=message, data=data)

    @classmethod
    def not_found(cls, message: str) -> "ServiceResult":
        return cls(outcome=Outcome.NOT_FOUND, message=message)

    @classmethod
    def no_match(cls, message: str) -> "ServiceResult":
        return cls(outcome=Outcome.NO_MATCH, message=message)

    @classmethod
    def no_text(cls, message: str) -> "ServiceResult":
        return cls(outcome=Outcome.NO_TEXT, message=message)

    @classmethod
    def no_op(cls, message: str, data: Any = None) -> "ServiceResult":
        return cls(outcome=Outcome.NO_OP, message=message, data=data)

    @classmethod
    def fault(cls, error: Exception) -> "ServiceResult":
        return cls(outcome=Outcome.FAULT, message=str(error) or "Something went wrong")
