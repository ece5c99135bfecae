"""
Input Validators and Sanitizers

This module provides validation and sanitization functions for user inputs.
These functions help prevent security issues and ensure data integrity.

Security Considerations:
- Link ids are checked before they reach the store (no arbitrary keys)
- Expiry offsets are checked before any timestamp arithmetic
"""

import math
import re
from numbers import Real
from typing import Optional

from linktracker.core.exceptions import InvalidInputError

MAX_LINK_ID_LENGTH = 32
MIN_EXPIRES_IN_HOURS = 1
# Ten years; keeps expiry arithmetic inside the datetime range
MAX_EXPIRES_IN_HOURS = 24 * 365 * 10


def sanitize_link_id(link_id: str) -> Optional[str]:
    """
    Sanitize and validate link id format.
    
    Generated ids are hex strings; anything outside [0-9a-zA-Z] can never
    have been issued.
    
    Args:
        link_id: The link id taken from the URL path
    
    Returns:
        Sanitized link id if valid, None otherwise
    """
    if not link_id or not isinstance(link_id, str):
        return None
    
    link_id = link_id.strip()
    
    if len(link_id) > MAX_LINK_ID_LENGTH:
        return None
    
    if not re.match(r'^[0-9a-zA-Z]+$', link_id):
        return None
    
    return link_id


def validate_expires_in_hours(value) -> float:
    """
    Validate the lifetime requested for a new link.
    
    Args:
        value: Requested lifetime in hours
    
    Returns:
        The lifetime as a float
    
    Raises:
        InvalidInputError: If value is not a finite real number between
            MIN_EXPIRES_IN_HOURS and MAX_EXPIRES_IN_HOURS
    """
    # bool is a Real subclass
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidInputError("expiresInHours", "must be a number greater than 0")
    
    hours = float(value)
    if not math.isfinite(hours) or hours < MIN_EXPIRES_IN_HOURS:
        raise InvalidInputError("expiresInHours", "must be a number greater than 0")
    
    if hours > MAX_EXPIRES_IN_HOURS:
        raise InvalidInputError(
            "expiresInHours", f"must not exceed {MAX_EXPIRES_IN_HOURS} hours"
        )
    
    return hours


def get_client_ip(request) -> str:
    """
    Extract client IP address from request.
    
    Handles proxies and load balancers by checking X-Forwarded-For header.
    
    Args:
        request: Starlette/FastAPI Request object
    
    Returns:
        IP address as string
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # X-Forwarded-For can contain multiple IPs, take the first one
        return forwarded_for.split(",")[0].strip()
    
    return request.client.host if request.client else "unknown"


def build_visitor_fingerprint(request) -> str:
    """
    Opaque visitor identity used to deduplicate clicks: client IP followed
    by the User-Agent header.
    """
    return get_client_ip(request) + request.headers.get("User-Agent", "")
