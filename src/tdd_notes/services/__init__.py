from .registry_service import RegistryService, SyncReport, load_catalog

__all__ = ["RegistryService", "SyncReport", "load_catalog"]
