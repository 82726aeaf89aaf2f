"""
LEARNING NOTE: Domain Models = Entidades del negocio
Representan conceptos del mundo real en código
"""

from typing import Optional
from pydantic import BaseModel, Field

class PredictionResult(BaseModel):
    """
    LEARNING NOTE: Resultado de pedir un año.
    Si el año ya existe es el valor real; si no, viene de la red neuronal.
    """

    key: int = Field(..., description="Año solicitado")
    count: int = Field(..., ge=0, description="Conteo real o estimado")
    percentage: Optional[float] = Field(
        None,
        ge=-100,
        le=100,
        description="% de cambio vs el último año conocido"
    )
    is_model_derived: bool = Field(..., description="Si el conteo lo generó la red")

    model_config = {
        "json_schema_extra": {
            "example": {
                "key": 2023,
                "count": 9,
                "percentage": 50.0,
                "is_model_derived": True
            }
        }
    }
