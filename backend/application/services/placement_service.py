"""
LEARNING NOTE: Servicio principal de colocaciones
Orquesta el flujo: cargar CSV -> entrenar -> predecir -> datos para la gráfica
"""

import threading
from typing import Any, Dict, List, Optional, Tuple
import logging

from backend.application.services.sequence_predictor import SequencePredictor
from backend.core.config import Settings, settings as default_settings
from backend.core.constants import MESSAGES, PredictionSource
from backend.core.exceptions import DataNotFoundException, InvalidInputException
from backend.domain.models.observation import Observation
from backend.domain.models.prediction import PredictionResult
from backend.infrastructure.ml.preprocessing import parse_placement_csv

logger = logging.getLogger(__name__)

def format_percentage(percentage: Optional[float]) -> Optional[str]:
    """Etiqueta con signo y un decimal, ej. +12.5%"""
    if percentage is None:
        return None
    return f"{percentage:+.1f}%"

class PlacementService:
    """
    Estado en memoria de una sesión: historia cargada + predictor

    LEARNING NOTE: Estado en memoria por simplicidad.
    El lock evita que dos requests toquen la red al mismo tiempo.
    """

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings
        self.history: List[Observation] = []
        self.predictor = SequencePredictor(self.config)
        self.highlight: Optional[PredictionResult] = None
        self._lock = threading.Lock()

    @property
    def has_data(self) -> bool:
        return bool(self.history)

    def _require_data(self) -> None:
        if not self.history:
            raise DataNotFoundException()

    def load_csv_with_chart(self, content: bytes) -> Tuple[List[Observation], Dict[str, Any]]:
        """
        Reemplaza la historia con la del CSV y descarta la red entrenada

        Returns:
            - Historia nueva
            - Datos de la gráfica tomados dentro del mismo lock
        """
        history = parse_placement_csv(content)

        if not history:
            raise InvalidInputException("el CSV no contiene registros con año")

        with self._lock:
            self.history = history
            self.predictor = SequencePredictor(self.config)
            self.highlight = None
            chart = self._build_chart()

        logger.info(MESSAGES["data_loaded"].format(
            years=len(history),
            records=sum(obs.count for obs in history)
        ))

        return history, chart

    def load_csv(self, content: bytes) -> List[Observation]:
        return self.load_csv_with_chart(content)[0]

    def train(self) -> Dict[str, Any]:
        """Entrena desde cero con la historia actual"""
        with self._lock:
            self._require_data()
            examples = self.predictor.fit(self.history)
            loss = self.predictor.network.mean_loss(examples)
            state = self.predictor.state

        logger.info(MESSAGES["training_completed"])

        return {
            "examples": len(examples),
            "epochs": self.config.training_epochs,
            "learning_rate": self.config.learning_rate,
            "final_loss": loss,
            "state": state.value
        }

    def predict_year_with_chart(self, year: int) -> Tuple[PredictionResult, Dict[str, Any]]:
        """Valor real o estimado para un año; queda resaltado en la gráfica"""
        with self._lock:
            self._require_data()
            result = self.predictor.forecast(year, self.history)
            self.highlight = result
            chart = self._build_chart()

        source = PredictionSource.MODEL if result.is_model_derived else PredictionSource.ACTUAL
        logger.info(MESSAGES["prediction_completed"].format(
            year=year, count=result.count, source=source.value
        ))

        return result, chart

    def predict_year(self, year: int) -> PredictionResult:
        return self.predict_year_with_chart(year)[0]

    def snapshot(self) -> Tuple[List[Observation], Dict[str, Any]]:
        """Historia y gráfica leídas juntas"""
        with self._lock:
            return list(self.history), self._build_chart()

    def chart_data(self) -> Dict[str, Any]:
        with self._lock:
            return self._build_chart()

    def _build_chart(self) -> Dict[str, Any]:
        """
        Datos para la gráfica de barras (llamar con el lock tomado)

        LEARNING NOTE: El eje Y llega al máximo (incluyendo la barra resaltada)
        más un margen, dividido en partes iguales
        """
        self._require_data()

        counts = [obs.count for obs in self.history]
        max_value = max(counts)

        highlight = None
        if self.highlight is not None:
            max_value = max(max_value, self.highlight.count)
            source = (
                PredictionSource.MODEL if self.highlight.is_model_derived
                else PredictionSource.ACTUAL
            )
            highlight = {
                "year": self.highlight.key,
                "count": self.highlight.count,
                "source": source.value,
                "label": format_percentage(self.highlight.percentage)
            }

        max_value += self.config.chart_headroom
        divisions = self.config.chart_divisions

        return {
            "bars": [{"year": obs.key, "count": obs.count} for obs in self.history],
            "highlight": highlight,
            "max_value": max_value,
            "y_ticks": [max_value * i // divisions for i in range(divisions + 1)]
        }
