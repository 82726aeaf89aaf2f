"""
LEARNING NOTE: Endpoints de entrenamiento y predicción
Reemplazan los botones "Train Model" y "DL Prediction"
"""

from fastapi import APIRouter, Depends, HTTPException
from starlette.concurrency import run_in_threadpool
import logging
import re
import time

from backend.api.v1.dependencies import get_placement_service
from backend.application.services.placement_service import (
    PlacementService,
    format_percentage
)
from backend.core.exceptions import InvalidInputException
from backend.domain.schemas.response.prediction import ForecastResponse, TrainResponse

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/predictions",
    tags=["predictions"],
    responses={404: {"description": "Not found"}}
)

_YEAR_PATTERN = re.compile(r"[+-]?\d+")

def parse_year(raw: str) -> int:
    """El año llega como texto; se rechaza si no es un entero"""
    value = raw.strip()
    if not value:
        raise InvalidInputException("ingresa un año")
    if not _YEAR_PATTERN.fullmatch(value):
        raise InvalidInputException(f"'{raw}' no es un año numérico válido")
    return int(value)

@router.post("/train", response_model=TrainResponse)
async def train_model(
    service: PlacementService = Depends(get_placement_service)
) -> TrainResponse:
    """
    Entrena la red desde cero con la historia cargada

    LEARNING NOTE: El entrenamiento es síncrono (1000 épocas),
    así que se corre en el threadpool para no bloquear el event loop
    """

    try:
        start_time = time.time()
        summary = await run_in_threadpool(service.train)

        return TrainResponse(
            success=True,
            processing_time=time.time() - start_time,
            **summary
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Training failed: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))

@router.get("/{year}", response_model=ForecastResponse)
async def forecast_year(
    year: str,
    service: PlacementService = Depends(get_placement_service)
) -> ForecastResponse:
    """
    Conteo real (si el año existe) o estimado por la red (si es futuro)

    LEARNING NOTE: También va al threadpool: si hay un entrenamiento en curso
    espera el lock ahí y no en el event loop
    """

    try:
        result, chart = await run_in_threadpool(
            service.predict_year_with_chart, parse_year(year)
        )

        return ForecastResponse(
            success=True,
            prediction=result,
            percentage_label=format_percentage(result.percentage),
            chart_data=chart
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Prediction failed: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
