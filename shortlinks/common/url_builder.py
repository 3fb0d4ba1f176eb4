"""Building the absolute short URLs handed back to clients."""

from typing import Mapping, Optional


def build_base_url(
    headers: Mapping[str, str],
    fallback_base_url: str,
    request_scheme: Optional[str] = None,
    request_host: Optional[str] = None,
) -> str:
    """Work out the scheme and host short links are served from.

    Priority:
    1. X-Forwarded-Proto + X-Forwarded-Host (both must be present)
    2. Scheme and Host of the serving request
    3. Fallback base URL from config

    Args:
        headers: Request headers
        fallback_base_url: Base URL from configuration
        request_scheme: Scheme of the serving request (http/https)
        request_host: Host header of the serving request

    Returns:
        Base URL without trailing slash (e.g., https://example.com)
    """
    lowered = {k.lower(): v for k, v in headers.items()}
    forwarded_proto = lowered.get("x-forwarded-proto")
    forwarded_host = lowered.get("x-forwarded-host")

    if forwarded_proto and forwarded_host:
        # proxies may append a chain, the first hop is the client-facing one
        proto = forwarded_proto.split(",")[0].strip()
        host = forwarded_host.split(",")[0].strip()
        return f"{proto}://{host}"

    if request_scheme and request_host:
        return f"{request_scheme}://{request_host}"

    return fallback_base_url.rstrip("/")


def build_short_url(
    short_code: str,
    base_url: str,
    path_prefix: str = "",
) -> str:
    """Build the complete short URL.

    Args:
        short_code: The short code
        base_url: Base URL (e.g., https://example.com)
        path_prefix: Optional path prefix (e.g., /s)

    Returns:
        Complete short URL
    """
    base = base_url.rstrip("/")
    prefix = path_prefix.strip("/")

    if prefix:
        return f"{base}/{prefix}/{short_code}"
    return f"{base}/{short_code}"
