from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse
import redis

from auth.utils import decode_access_token
from core.config import REDIS_URL, ALLOWED_ORIGINS
from core.logger import setup_logger

logger = setup_logger("rate_limiter")

REGISTER_LIMIT = "5/minute"
LOGIN_LIMIT = "10/minute"
EVALUATION_LIMIT = "30/minute"


def _redis_reachable(url: str) -> bool:
    try:
        redis.from_url(url, socket_connect_timeout=2).ping()
        return True
    except redis.RedisError as e:
        logger.warning(f"Redis unavailable at {url} ({e}), rate limits kept in memory")
        return False


STORAGE_URI = REDIS_URL if _redis_reachable(REDIS_URL) else "memory://"


def get_identifier(request: Request) -> str:
    """
    Rate limit key: the user id from a valid bearer token,
    otherwise the client address (first X-Forwarded-For hop when proxied).
    """
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        token_data = decode_access_token(auth_header[len("Bearer "):])
        if token_data is not None:
            return f"user:{token_data.user_id}"

    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


limiter = Limiter(
    key_func=get_identifier,
    storage_uri=STORAGE_URI,
    strategy="fixed-window"
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """429 with CORS headers, the middleware does not run for this response"""
    origin = request.headers.get("origin", "")

    headers = {}
    if origin in ALLOWED_ORIGINS:
        headers = {
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Credentials": "true",
        }

    logger.info(f"Rate limit hit for {get_identifier(request)} on {request.url.path}")
    return JSONResponse(
        status_code=429,
        content={
            "error": "Rate limit exceeded",
            "detail": str(exc.detail),
        },
        headers=headers
    )
