"""
Client metadata for audit events and rate limiting.
"""

from typing import Optional

from fastapi import Request


def client_ip(request: Request) -> Optional[str]:
    """First X-Forwarded-For hop, then X-Real-IP, then the socket peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()

    if request.client is not None:
        return request.client.host
    return None


def user_agent(request: Request) -> Optional[str]:
    return request.headers.get("user-agent")
