"""
LEARNING NOTE: Response schemas para colocaciones
"""

from pydantic import BaseModel, Field
from typing import List, Optional, Dict, Any
from datetime import datetime

from backend.domain.models.observation import Observation
from backend.domain.models.prediction import PredictionResult

class HistoryResponse(BaseModel):
    """Historia cargada + datos de la gráfica"""

    success: bool = Field(..., description="Si la operación fue exitosa")
    observations: List[Observation] = Field(..., description="Años y conteos ordenados")
    chart_data: Dict[str, Any] = Field(..., description="Barras para la gráfica")
    message: Optional[str] = None

class TrainResponse(BaseModel):
    """Response del entrenamiento"""

    success: bool
    examples: int = Field(..., description="Ejemplos de entrenamiento usados")
    epochs: int
    learning_rate: float
    final_loss: float = Field(..., description="Error cuadrático promedio al terminar")
    state: str

    # Metadata
    processing_time: float = Field(..., description="Tiempo de entrenamiento en segundos")
    timestamp: datetime = Field(default_factory=datetime.now)

    model_config = {
        "json_schema_extra": {
            "example": {
                "success": True,
                "examples": 3,
                "epochs": 1000,
                "learning_rate": 0.1,
                "final_loss": 0.0123,
                "state": "trained",
                "processing_time": 0.21
            }
        }
    }

class ForecastResponse(BaseModel):
    """Response de una predicción"""

    success: bool
    prediction: PredictionResult
    percentage_label: Optional[str] = Field(None, description="Ej. +12.5%")
    chart_data: Dict[str, Any]
