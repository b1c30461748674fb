from typing import Any, List, Optional
from fastapi import HTTPException, status

class BaseAppException(HTTPException):
    def __init__(self, status_code: int, detail: Any):
        super().__init__(status_code=status_code, detail=detail)

class ValidationError(BaseAppException):
    """Rejected input; `errors` lists every violation, not just the first."""

    def __init__(self, detail: str = "Validation error", errors: Optional[List[str]] = None):
        self.errors = errors or [detail]
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)

class NotFoundError(BaseAppException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)
