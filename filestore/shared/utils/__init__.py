"""Shared utilities: datetime and id generators."""

from filestore.shared.utils.datetime import (
    ensure_utc,
    utc_now,
)
from filestore.shared.utils.generators import (
    IdGenerator,
    configure_id_generator,
    generate_id,
)

__all__ = [
    "IdGenerator",
    "configure_id_generator",
    "generate_id",
    "utc_now",
    "ensure_utc",
]
