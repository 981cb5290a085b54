from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address


def client_key(request: Request) -> str:
    """Rate limit key: first X-Forwarded-For hop, else the peer address.

    Event deliveries and app callables reach the service through the
    hosting platform's proxy.
    """
    forwarded = request.headers.get("x-forwarded-for", "")
    first_hop = forwarded.split(",")[0].strip()
    return first_hop or get_remote_address(request)


limiter = Limiter(key_func=client_key)


async def rate_limit_handler(_request: Request, exc: Exception):
    """Return 429 with the exceeded limit in the body."""
    if isinstance(exc, RateLimitExceeded):
        return JSONResponse(
            status_code=429,
            content={"message": "Rate limit exceeded", "limit": str(exc.detail)},
        )


def setup_rate_limiter(app: FastAPI):
    """Attach the shared limiter and its 429 handler to ``app``."""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)


def get_limiter():
    return limiter
