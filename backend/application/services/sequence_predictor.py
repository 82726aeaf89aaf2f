"""
LEARNING NOTE: Puente entre la historia de colocaciones y la red neuronal
Normaliza para entrenar y desnormaliza para predecir
"""

import numpy as np
from typing import List, Optional, Sequence
import logging

from backend.core.config import Settings, settings as default_settings
from backend.core.constants import INPUT_SIZE, MESSAGES, OUTPUT_SIZE, ModelState
from backend.core.exceptions import (
    InsufficientDataException,
    NotTrainedException,
    OutOfRangeException
)
from backend.domain.models.observation import Observation, TrainingExample
from backend.domain.models.prediction import PredictionResult
from backend.infrastructure.ml.models.feedforward import FeedforwardNetwork
from backend.infrastructure.ml.preprocessing import (
    build_features,
    normalization_constant,
    validate_history
)

logger = logging.getLogger(__name__)

def clamp_percentage(value: float) -> float:
    return max(-100.0, min(100.0, value))

class SequencePredictor:
    """
    Predice el conteo del siguiente año con una red 3 -> 10 -> 5 -> 1

    LEARNING NOTE: Cada fit() crea una red NUEVA con pesos aleatorios,
    nunca se reentrena la anterior
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        rng: Optional[np.random.Generator] = None
    ):
        self.config = config or default_settings
        self.rng = rng or np.random.default_rng(self.config.random_seed)
        self.network: Optional[FeedforwardNetwork] = None

    @property
    def state(self) -> ModelState:
        return ModelState.TRAINED if self.network is not None else ModelState.UNTRAINED

    @property
    def is_trained(self) -> bool:
        return self.network is not None

    def build_training_set(self, history: Sequence[Observation]) -> List[TrainingExample]:
        """
        Un ejemplo por cada año excepto el último (su target es el año siguiente)
        """
        required = self.config.min_history_length
        if len(history) < required:
            raise InsufficientDataException(len(history), required)

        validate_history(history)

        max_count = normalization_constant(history)
        first_key = history[0].key

        examples = []
        for i in range(len(history) - 1):
            previous = history[i - 1].count if i > 0 else None
            features = build_features(
                history[i].key - first_key,
                history[i].count,
                previous,
                max_count,
                self.config.year_scale
            )
            examples.append(
                TrainingExample(features=features, target=history[i + 1].count / max_count)
            )

        return examples

    def fit(self, history: Sequence[Observation]) -> List[TrainingExample]:
        """
        Entrena una red nueva y reemplaza la anterior

        Returns:
            Los ejemplos usados (útil para métricas)
        """
        # Validar antes de tocar el estado
        examples = self.build_training_set(history)

        network = FeedforwardNetwork(
            INPUT_SIZE,
            self.config.hidden_size_1,
            self.config.hidden_size_2,
            OUTPUT_SIZE,
            rng=self.rng,
            loss_log_interval=self.config.loss_log_interval
        )

        logger.info(MESSAGES["training_started"].format(examples=len(examples)))
        network.train(
            examples,
            epochs=self.config.training_epochs,
            learning_rate=self.config.learning_rate
        )

        self.network = network
        return examples

    def forecast(self, target_key: int, history: Sequence[Observation]) -> PredictionResult:
        """
        Conteo para un año: real si existe, estimado por la red si es futuro

        LEARNING NOTE: El orden de validación importa:
        1. Año conocido -> valor real (aunque no haya red)
        2. Sin red -> NotTrained
        3. Año no posterior al último -> OutOfRange
        """
        for obs in history:
            if obs.key == target_key:
                return PredictionResult(
                    key=target_key,
                    count=obs.count,
                    percentage=None,
                    is_model_derived=False
                )

        if self.network is None:
            raise NotTrainedException()

        if len(history) < 2:
            raise InsufficientDataException(len(history), 2, action="predecir")

        last, before_last = history[-1], history[-2]
        if target_key <= last.key:
            raise OutOfRangeException(target_key, last.key)

        max_count = normalization_constant(history)
        features = build_features(
            target_key - history[0].key,
            last.count,
            before_last.count,
            max_count,
            self.config.year_scale
        )

        output = self.network.predict(features)
        predicted = max(0, int(round(float(output[0]) * max_count)))

        percentage = None
        if last.count != 0:
            percentage = clamp_percentage((predicted - last.count) / last.count * 100)

        return PredictionResult(
            key=target_key,
            count=predicted,
            percentage=percentage,
            is_model_derived=True
        )
