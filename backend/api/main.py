import uuid
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Depends, HTTPException, status, Request

from common.config import settings
from common.expiry import (
    ExpiryError, ExpiryPolicy, classify_gap, format_timestamp, gap_in_hours,
    parse_timestamp, will_expire_at
)
from api.schemas import ExpiryRequest, ExpiryResponse, HealthResponse

logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)
app = FastAPI(title="Task Expiry API")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)

# --- Middleware & Dependencies ---

@app.middleware("http")
async def add_request_id(request: Request, call_next):
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response

async def get_authenticated_caller(request: Request) -> Optional[str]:
    tokens = settings.auth_tokens
    if not tokens:
        return None
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing or invalid authorization header")
    token = auth_header.split(" ")[1]
    if token not in tokens:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return token

def get_policy() -> ExpiryPolicy:
    return ExpiryPolicy.from_settings()

# --- Endpoints ---

@app.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse(status="ok", env=settings.APP_ENV)

@app.post("/v1/expiry", response_model=ExpiryResponse)
async def compute_expiry(payload: ExpiryRequest,
                         caller: Optional[str] = Depends(get_authenticated_caller),
                         policy: ExpiryPolicy = Depends(get_policy)):
    try:
        due_time = parse_timestamp(payload.due_time)
        created_at = parse_timestamp(payload.created_at)
        gap = gap_in_hours(due_time, created_at)
        expires_at = will_expire_at(due_time, created_at, policy)
    except ExpiryError as e:
        logger.warning("Rejected expiry request task_id=%s: %s", payload.task_id, e)
        raise HTTPException(status_code=422, detail=str(e))

    return ExpiryResponse(
        task_id=payload.task_id,
        expires_at=expires_at.isoformat(),
        expires_at_display=format_timestamp(expires_at),
        bracket=classify_gap(gap, policy).value,
        gap_hours=gap,
    )
