"""
LEARNING NOTE: Preprocessing de colocaciones
Del CSV crudo (Nombre,Año) a la historia ordenada y a los features de la red
"""

import io
import pandas as pd
from typing import List, Optional, Sequence, Union
import logging

from backend.core.exceptions import InvalidInputException
from backend.domain.models.observation import Observation

logger = logging.getLogger(__name__)

# Columna del CSV que contiene el año (la primera es el nombre y se ignora)
YEAR_COLUMN = 1

_INTEGER_PATTERN = r"[+-]?\d+"

# ========== LECTURA DEL CSV ==========

def read_placement_csv(source: Union[str, bytes, io.IOBase]) -> pd.DataFrame:
    """
    Lee el CSV como texto, saltando el encabezado

    LEARNING NOTE: Las filas con columnas de más se recortan hasta la columna del año
    """
    if isinstance(source, bytes):
        source = io.BytesIO(source)

    try:
        return pd.read_csv(
            source,
            dtype=str,
            engine="python",
            keep_default_na=False,
            on_bad_lines=lambda fields: fields[:YEAR_COLUMN + 1]
        )
    except pd.errors.EmptyDataError:
        return pd.DataFrame()
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise InvalidInputException(f"no se pudo leer el CSV: {e}")

def aggregate_year_counts(df: pd.DataFrame) -> List[Observation]:
    """
    Cuenta registros por año y los ordena ascendentemente

    LEARNING NOTE: Filas sin segunda columna (o vacía) se ignoran;
    un año no numérico invalida todo el archivo
    """
    if df.empty or df.shape[1] <= YEAR_COLUMN:
        return []

    years = df.iloc[:, YEAR_COLUMN].fillna("").astype(str).str.strip()
    years = years[years != ""]

    if years.empty:
        return []

    invalid = years[~years.str.fullmatch(_INTEGER_PATTERN)]
    if not invalid.empty:
        raise InvalidInputException(f"año no numérico '{invalid.iloc[0]}'")

    counts = years.astype(int).value_counts().sort_index()

    return [
        Observation(key=int(year), count=int(count))
        for year, count in counts.items()
    ]

def parse_placement_csv(source: Union[str, bytes, io.IOBase]) -> List[Observation]:
    """Atajo: CSV -> historia de observaciones"""
    df = read_placement_csv(source)
    history = aggregate_year_counts(df)

    logger.info(f"CSV procesado: {len(df)} registros, {len(history)} años")

    return history

# ========== NORMALIZACIÓN ==========

def validate_history(history: Sequence[Observation]) -> None:
    """Claves estrictamente crecientes (la historia ya viene sin duplicados)"""
    for previous, current in zip(history, history[1:]):
        if current.key <= previous.key:
            raise InvalidInputException(
                f"los años deben ser estrictamente crecientes ({previous.key} -> {current.key})"
            )

def normalization_constant(history: Sequence[Observation]) -> float:
    """
    Máximo conteo de la historia

    LEARNING NOTE: Mínimo 1 para no dividir entre cero si todo es 0
    """
    return float(max([obs.count for obs in history] + [1]))

def build_features(
    key_offset: int,
    current_count: int,
    previous_count: Optional[int],
    max_count: float,
    year_scale: float = 10.0
) -> List[float]:
    """
    Vector de 3 features: año desplazado, conteo actual y tendencia

    Args:
        key_offset: Años desde el primer año de la historia
        current_count: Conteo de referencia
        previous_count: Conteo anterior (None si no hay, tendencia = 0)
        max_count: Constante de normalización
        year_scale: Divisor para el desplazamiento del año
    """
    trend = 0.0 if previous_count is None else (current_count - previous_count) / max_count

    return [
        key_offset / year_scale,
        current_count / max_count,
        trend
    ]
