"""
LEARNING NOTE: Red neuronal feedforward con dos capas ocultas
Backpropagation manual con numpy, sin frameworks de autodiff
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional, Sequence
import logging

from backend.core.constants import INITIAL_BIAS
from backend.domain.models.observation import TrainingExample

logger = logging.getLogger(__name__)

@dataclass
class NetworkParameters:
    """
    Pesos y bias de la red

    LEARNING NOTE: Los pesos se indexan (neurona origen, neurona destino),
    así que w1 tiene forma (entrada, oculta1), w2 (oculta1, oculta2) y w3 (oculta2, salida)
    """

    w1: np.ndarray
    w2: np.ndarray
    w3: np.ndarray
    b1: np.ndarray
    b2: np.ndarray
    b3: np.ndarray

    @classmethod
    def initialize(
        cls,
        input_size: int,
        hidden_size1: int,
        hidden_size2: int,
        output_size: int,
        rng: np.random.Generator
    ) -> "NetworkParameters":
        """
        Pesos ~ N(0, 1) * sqrt(2 / fan_in), bias constantes

        LEARNING NOTE: La escala depende del ancho de ENTRADA de cada capa
        """
        def layer(fan_in: int, fan_out: int) -> np.ndarray:
            return rng.standard_normal((fan_in, fan_out)) * np.sqrt(2.0 / fan_in)

        return cls(
            w1=layer(input_size, hidden_size1),
            w2=layer(hidden_size1, hidden_size2),
            w3=layer(hidden_size2, output_size),
            b1=np.full(hidden_size1, INITIAL_BIAS),
            b2=np.full(hidden_size2, INITIAL_BIAS),
            b3=np.full(output_size, INITIAL_BIAS)
        )

def relu(x: np.ndarray) -> np.ndarray:
    return np.maximum(0.0, x)

def relu_derivative(x: np.ndarray) -> np.ndarray:
    # Subgradiente en 0 = 0
    return (x > 0).astype(float)

def sigmoid(x: np.ndarray) -> np.ndarray:
    """Sigmoide logística sin clipping: overflow y NaN se propagan"""
    return 1.0 / (1.0 + np.exp(-x))

class FeedforwardNetwork:
    """
    Red entrada -> ReLU -> ReLU -> sigmoide

    LEARNING NOTE: La red no sabe nada de años ni conteos,
    solo recibe vectores de tamaño fijo
    """

    def __init__(
        self,
        input_size: int,
        hidden_size1: int,
        hidden_size2: int,
        output_size: int,
        rng: Optional[np.random.Generator] = None,
        loss_log_interval: int = 100
    ):
        """
        Args:
            input_size: Número de features de entrada
            hidden_size1: Neuronas de la primera capa oculta
            hidden_size2: Neuronas de la segunda capa oculta
            output_size: Número de salidas
            rng: Generador aleatorio explícito (para entrenamientos reproducibles)
            loss_log_interval: Cada cuántas épocas se reporta el loss promedio
        """
        self.input_size = input_size
        self.hidden_size1 = hidden_size1
        self.hidden_size2 = hidden_size2
        self.output_size = output_size
        self.loss_log_interval = loss_log_interval

        if rng is None:
            rng = np.random.default_rng()

        self.params = NetworkParameters.initialize(
            input_size, hidden_size1, hidden_size2, output_size, rng
        )

    def _as_input(self, inputs: Sequence[float]) -> np.ndarray:
        x = np.asarray(inputs, dtype=float)
        if x.shape != (self.input_size,):
            raise ValueError(
                f"Se esperaban {self.input_size} features, se recibieron {x.shape}"
            )
        return x

    def _forward(self, x: np.ndarray):
        """Forward pass que conserva los valores crudos de las capas ocultas"""
        p = self.params

        hidden1_raw = p.b1 + x @ p.w1
        hidden1 = relu(hidden1_raw)

        hidden2_raw = p.b2 + hidden1 @ p.w2
        hidden2 = relu(hidden2_raw)

        output = sigmoid(p.b3 + hidden2 @ p.w3)

        return hidden1_raw, hidden1, hidden2_raw, hidden2, output

    def predict(self, inputs: Sequence[float]) -> np.ndarray:
        """
        Forward pass puro, sin efectos secundarios

        Returns:
            Vector de tamaño output_size con valores en (0, 1)
        """
        return self._forward(self._as_input(inputs))[-1]

    def mean_loss(self, examples: Sequence[TrainingExample]) -> float:
        """Error cuadrático promedio por ejemplo, sin modificar los pesos"""
        if not examples:
            return 0.0

        total = 0.0
        for example in examples:
            output = self.predict(example.features)
            total += float(np.sum((example.target - output) ** 2))

        return total / len(examples)

    def train(
        self,
        examples: Sequence[TrainingExample],
        epochs: int,
        learning_rate: float
    ) -> None:
        """
        Descenso de gradiente estocástico (un update por ejemplo)

        LEARNING NOTE: El error de salida es (o - t) * o * (1 - o), es decir,
        squared error combinado con la derivada de la sigmoide. Primero se calculan
        los errores de las tres capas con los pesos actuales y DESPUÉS se actualizan.
        """
        p = self.params
        targets = [np.full(self.output_size, example.target) for example in examples]
        inputs = [self._as_input(example.features) for example in examples]

        for epoch in range(epochs):
            total_loss = 0.0

            for x, target in zip(inputs, targets):
                hidden1_raw, hidden1, hidden2_raw, hidden2, output = self._forward(x)

                total_loss += float(np.sum((target - output) ** 2))

                # Backpropagation
                output_error = (output - target) * output * (1 - output)
                hidden2_error = (p.w3 @ output_error) * relu_derivative(hidden2_raw)
                hidden1_error = (p.w2 @ hidden2_error) * relu_derivative(hidden1_raw)

                # Actualizar pesos y bias
                p.w3 -= learning_rate * np.outer(hidden2, output_error)
                p.b3 -= learning_rate * output_error

                p.w2 -= learning_rate * np.outer(hidden1, hidden2_error)
                p.b2 -= learning_rate * hidden2_error

                p.w1 -= learning_rate * np.outer(x, hidden1_error)
                p.b1 -= learning_rate * hidden1_error

            if self.loss_log_interval and epoch % self.loss_log_interval == 0:
                logger.debug(
                    f"Epoch {epoch}, Loss: {total_loss / max(len(inputs), 1):.6f}"
                )
