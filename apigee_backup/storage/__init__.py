"""
Storage module for object storage access.
"""

from .gcs_storage import GcsStorage, gcs_uri

__all__ = [
    "GcsStorage",
    "gcs_uri"
]
