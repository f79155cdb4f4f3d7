r"""Default values shared by the client and the retry helpers."""

from __future__ import annotations

__all__ = ["DEFAULT_TIMEOUT", "RETRY_STATUS_CODES"]

# Default timeout in seconds for HTTP requests
DEFAULT_TIMEOUT = 10.0

# HTTP status codes usually worth retrying
# 429: Too Many Requests - Rate limiting
# 500: Internal Server Error - Temporary server issue
# 502: Bad Gateway - Upstream server error
# 503: Service Unavailable - Server overloaded or down
# 504: Gateway Timeout - Upstream server timeout
RETRY_STATUS_CODES = (429, 500, 502, 503, 504)
