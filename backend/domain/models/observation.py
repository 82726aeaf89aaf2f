"""
LEARNING NOTE: Domain Models = Entidades del negocio
Una observación es un año con su número de alumnos colocados
"""

from typing import List
from pydantic import BaseModel, Field

class Observation(BaseModel):
    """Un par (año, conteo) de la historia agregada"""

    key: int = Field(..., description="Año (clave ordinal)")
    count: int = Field(..., ge=0, description="Alumnos colocados en ese año")

    model_config = {
        "frozen": True,
        "json_schema_extra": {"example": {"key": 2021, "count": 13}}
    }

class TrainingExample(BaseModel):
    """
    Ejemplo normalizado para la red

    LEARNING NOTE: features = (desplazamiento del año / 10,
    conteo / máximo, tendencia / máximo); target = siguiente conteo / máximo
    """

    features: List[float] = Field(..., min_length=3, max_length=3)
    target: float

    model_config = {"frozen": True}
