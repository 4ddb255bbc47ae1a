"""Response body for ``POST /render``."""

from pydantic import BaseModel


class RenderResponse(BaseModel):
    html: str
