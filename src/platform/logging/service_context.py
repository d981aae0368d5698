"""
Client context for log lines.

Several booking clients (web, mobile, kiosk) can share one log collector, so
every line carries which client build and which process produced it.
"""

import os
from functools import lru_cache


@lru_cache(maxsize=1)
def get_service_context() -> str:
    client_name = os.getenv('CLIENT_NAME', 'vexeviet-booking-core')
    client_platform = os.getenv('CLIENT_PLATFORM', 'local')

    return f'{client_name}@{client_platform}:{os.getpid()}'
