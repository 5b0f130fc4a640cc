"""planquota package exposing the service factory."""
from .app import QuotaServices, create_services

__all__ = ["QuotaServices", "create_services"]
