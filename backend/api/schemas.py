from pydantic import BaseModel, Field
from typing import Optional

class ExpiryRequest(BaseModel):
    due_time: str = Field(..., min_length=1)
    created_at: str = Field(..., min_length=1)
    task_id: Optional[str] = None

class ExpiryResponse(BaseModel):
    task_id: Optional[str] = None
    expires_at: str
    expires_at_display: str
    bracket: str
    gap_hours: int

class HealthResponse(BaseModel):
    status: str
    env: str
