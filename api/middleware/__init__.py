from .request_id import RequestIDMiddleware, get_request_id, get_client_ip
from .logging import LoggingMiddleware
from .locale import LocaleMiddleware

__all__ = [
    "RequestIDMiddleware",
    "LoggingMiddleware",
    "LocaleMiddleware",
    "get_request_id",
    "get_client_ip",
]
