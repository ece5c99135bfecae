"""
Rate Limiting Configuration

This module provides rate limiting functionality for API endpoints.
Rate limiting prevents abuse and ensures fair usage.

Design Decisions:
- Uses slowapi for rate limiting (lightweight, FastAPI-compatible)
- Different limits for different endpoints
- IP-based limiting
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

# Initialize rate limiter
# Uses IP address for rate limiting
limiter = Limiter(key_func=get_remote_address)

# Rate limit configurations per endpoint
# Format: "count/period" (e.g., "10/minute" means 10 requests per minute)
RATE_LIMITS = {
    "create": "30/minute",  # Link creation: 30 per minute per IP
    "track": "100/minute",  # Clicks: 100 per minute per IP
    "stats": "60/minute",  # Single link stats: 60 per minute per IP
    "list": "30/minute",  # Dashboard listing: 30 per minute per IP
}
