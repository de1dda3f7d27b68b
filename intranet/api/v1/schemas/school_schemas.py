"""
Modelos Pydantic para la importación de matriculados.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, Field


class EnrollmentImportRequest(BaseModel):
    """Filas ya leídas por la intranet, enviadas como JSON."""

    datos: list[dict[str, Any]] = Field(default_factory=list, description="Filas del archivo")
    nombre_archivo: str = Field(
        default="archivo_importado", validation_alias=AliasChoices("nombreArchivo", "nombre_archivo")
    )
