"""
LEARNING NOTE: Una sola instancia del servicio para toda la app
Se inyecta con Depends para poder reemplazarla en tests
"""

from functools import lru_cache

from backend.application.services.placement_service import PlacementService

@lru_cache()
def get_placement_service() -> PlacementService:
    return PlacementService()
