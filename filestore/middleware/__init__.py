"""HTTP middleware: request size limit and request ID.

Applied in filestore.main; order matters (last added = outermost).
"""

from filestore.middleware.request_id import RequestIDMiddleware
from filestore.middleware.request_size_limit import RequestSizeLimitMiddleware

__all__ = ["RequestIDMiddleware", "RequestSizeLimitMiddleware"]
