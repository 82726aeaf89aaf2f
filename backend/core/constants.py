"""
LEARNING NOTE: Constantes de la red y mensajes para el usuario
"""

from enum import Enum

# Topología fija de la red: features de entrada y una sola salida
INPUT_SIZE = 3
OUTPUT_SIZE = 1

# Bias inicial de todas las neuronas
INITIAL_BIAS = 0.01

# Estado del predictor
class ModelState(str, Enum):
    """Enum para el ciclo de vida del predictor"""
    UNTRAINED = "untrained"
    TRAINED = "trained"

# Origen del valor mostrado en la barra resaltada
class PredictionSource(str, Enum):
    ACTUAL = "actual"
    MODEL = "model"

# Mensajes comunes
MESSAGES = {
    "data_loaded": "Datos cargados: {years} años, {records} registros",
    "training_started": "Entrenando red neuronal con {examples} ejemplos",
    "training_completed": "Red neuronal entrenada correctamente",
    "prediction_completed": "Predicción para {year}: {count} ({source})",
}
