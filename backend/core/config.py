"""
LEARNING NOTE: Este archivo centraliza TODA la configuración.
Patrón: "Single Source of Truth" para configuraciones.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from functools import lru_cache

class Settings(BaseSettings):
    """
    LEARNING NOTE: Pydantic Settings valida automáticamente las variables de entorno
    y las convierte al tipo correcto (int, float, bool, etc.)
    Todas se pueden sobreescribir con el prefijo PLACEMENT_ (ej. PLACEMENT_TRAINING_EPOCHS)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PLACEMENT_",
        case_sensitive=False,
        extra="ignore"
    )

    # API Settings
    api_version: str = "v1"
    debug_mode: bool = False
    port: int = 8000
    max_upload_bytes: int = 5_000_000

    # Red neuronal (topología 3 -> 10 -> 5 -> 1)
    hidden_size_1: int = 10
    hidden_size_2: int = 5
    training_epochs: int = 1000
    learning_rate: float = 0.1
    loss_log_interval: int = 100
    random_seed: Optional[int] = None

    # Normalización de features
    year_scale: float = 10.0
    min_history_length: int = Field(3, ge=3)

    # Gráfica de barras
    chart_headroom: int = 20
    chart_divisions: int = 5

@lru_cache()
def get_settings() -> Settings:
    """
    LEARNING NOTE: @lru_cache hace que solo se cree una instancia (Singleton Pattern)
    Esto evita leer el .env múltiples veces
    """
    return Settings()

# Instancia global para importar fácilmente
settings = get_settings()
