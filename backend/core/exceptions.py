"""
LEARNING NOTE: Excepciones custom para errores específicos del negocio.
Mejor que usar Exception genérica porque son más descriptivas.
"""

from fastapi import HTTPException
from typing import Any, Dict, Optional

class BusinessException(HTTPException):
    """Base para todas las excepciones de negocio"""
    def __init__(
        self,
        status_code: int = 400,
        detail: str = "Business logic error",
        headers: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)

class DataNotFoundException(BusinessException):
    """Cuando todavía no se ha cargado ningún CSV"""
    def __init__(self):
        super().__init__(
            status_code=404,
            detail="No hay datos de colocaciones cargados. Sube un CSV primero"
        )

class InvalidInputException(BusinessException):
    """Cuando el CSV o el año recibido no tienen el formato esperado"""
    def __init__(self, detail: str):
        super().__init__(
            status_code=400,
            detail=f"Entrada inválida: {detail}"
        )

class InsufficientDataException(BusinessException):
    """Cuando no hay suficientes años para entrenar o predecir"""
    def __init__(self, available: int, required: int = 3, action: str = "entrenar"):
        self.available = available
        self.required = required
        super().__init__(
            status_code=422,
            detail=f"Se necesitan al menos {required} años de datos para {action} (hay {available})"
        )

class NotTrainedException(BusinessException):
    """Cuando se pide una predicción antes de entrenar la red"""
    def __init__(self):
        super().__init__(
            status_code=409,
            detail="No se pudo predecir. Entrena el modelo primero"
        )

class OutOfRangeException(BusinessException):
    """Cuando el año pedido no es posterior al último año conocido"""
    def __init__(self, key: int, last_key: int):
        self.key = key
        self.last_key = last_key
        super().__init__(
            status_code=422,
            detail=(
                f"El año {key} no está en la historia y no es posterior "
                f"al último año conocido ({last_key})"
            )
        )
