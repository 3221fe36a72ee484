"""
Security utilities and authentication
"""

import secrets
import time
from collections import defaultdict
from typing import Dict, List, Optional

from fastapi import HTTPException, Depends, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from seatsmart.core.config import settings

security = HTTPBearer()

class RateLimiter:
    """Sliding one-minute window of request times per client"""

    def __init__(self, window_seconds: int = 60):
        self.window_seconds = window_seconds
        self.requests: Dict[str, List[float]] = defaultdict(list)

    def check(self, client_key: str, limit: Optional[int] = None) -> bool:
        if limit is None:
            limit = settings.RATE_LIMIT_PER_MINUTE

        now = time.time()
        window_start = now - self.window_seconds

        # Clean old requests
        self.requests[client_key] = [t for t in self.requests[client_key] if t > window_start]

        # Check limit
        if len(self.requests[client_key]) >= limit:
            return False

        # Add current request
        self.requests[client_key].append(now)
        return True

    def reset(self):
        self.requests.clear()

# Simple in-memory rate limiter
rate_limiter = RateLimiter()

def verify_admin_token(credentials: HTTPAuthorizationCredentials = Depends(security)):
    """Verify admin authentication token"""
    if not secrets.compare_digest(credentials.credentials, settings.ADMIN_TOKEN):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin token"
        )
    return credentials.credentials

def rate_limit_check(client_ip: str, limit: Optional[int] = None) -> bool:
    """Simple rate limiting by IP address"""
    return rate_limiter.check(client_ip, limit)

def get_client_ip(request: Request) -> str:
    """Extract client IP from request, honouring reverse proxy headers"""
    # Check for forwarded IP first (for reverse proxy setups)
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    # Check for real IP header
    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    # Fall back to direct client IP
    return request.client.host if request.client else "unknown"
