"""
LEARNING NOTE: Endpoints para cargar y consultar la historia de colocaciones
Reemplazan los botones "Upload CSV" de la app de escritorio
"""

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from starlette.concurrency import run_in_threadpool
import logging

from backend.api.v1.dependencies import get_placement_service
from backend.application.services.placement_service import PlacementService
from backend.core.config import settings
from backend.core.constants import MESSAGES
from backend.core.exceptions import InvalidInputException
from backend.domain.schemas.response.prediction import HistoryResponse

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/placements",
    tags=["placements"],
    responses={404: {"description": "Not found"}}
)

@router.post("/upload", response_model=HistoryResponse)
async def upload_placements(
    file: UploadFile = File(..., description="CSV con columnas Nombre,Año"),
    service: PlacementService = Depends(get_placement_service)
) -> HistoryResponse:
    """
    Carga un CSV y agrega los registros por año

    LEARNING NOTE: Cargar un archivo nuevo descarta la red entrenada
    """

    try:
        content = await file.read()

        if len(content) > settings.max_upload_bytes:
            raise InvalidInputException(
                f"el archivo supera {settings.max_upload_bytes} bytes"
            )

        history, chart = await run_in_threadpool(service.load_csv_with_chart, content)

        return HistoryResponse(
            success=True,
            observations=history,
            chart_data=chart,
            message=MESSAGES["data_loaded"].format(
                years=len(history),
                records=sum(obs.count for obs in history)
            )
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error cargando CSV: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))

@router.get("", response_model=HistoryResponse)
async def get_placements(
    service: PlacementService = Depends(get_placement_service)
) -> HistoryResponse:
    """Historia actual y datos de la gráfica"""

    history, chart = await run_in_threadpool(service.snapshot)

    return HistoryResponse(
        success=True,
        observations=history,
        chart_data=chart
    )
