"""filestore: content-addressable file storage service.

Layers: domain (enums, exceptions), application (DTOs, ports, services,
use cases), infrastructure (persistence, storage backends, HTTP fetch),
api (FastAPI routes). See filestore.main for the ASGI entry point.
"""
