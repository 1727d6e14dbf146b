"""Response bodies shared by every endpoint."""

from pydantic import BaseModel


class ErrorMessage(BaseModel):
    """Error body returned for every non-2xx response."""

    details: str
