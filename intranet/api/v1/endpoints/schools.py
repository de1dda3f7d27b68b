"""
Endpoints de colegios: importación de matriculados.

Acepta un archivo multipart (``file``: .csv, .xlsx o .xls) o un JSON
``{"datos": [...]}`` con las filas ya leídas por la intranet.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError
from starlette.datastructures import UploadFile

from intranet.api.v1.dependencies import get_enrollment_import_service
from intranet.api.v1.schemas.school_schemas import EnrollmentImportRequest
from intranet.core.config import get_settings
from intranet.services.schools import EnrollmentImportService, read_upload
from intranet.utils.error_handler import ValidationException

logger = logging.getLogger(__name__)

router = APIRouter()


async def _rows_from_request(request: Request) -> tuple[str, list[dict[str, Any]]]:
    settings = get_settings()
    content_type = request.headers.get("content-type", "")

    if "application/json" in content_type:
        try:
            payload = EnrollmentImportRequest.model_validate(await request.json())
        except (ValueError, ValidationError) as e:
            raise ValidationException(message="El cuerpo JSON debe tener la forma {\"datos\": [...]}", field="datos") from e
        return payload.nombre_archivo, payload.datos

    try:
        form = await request.form()
    except Exception as e:
        raise ValidationException(
            message="Error al procesar el archivo. Por favor, intenta nuevamente.", field="file"
        ) from e

    upload = form.get("file")
    if not isinstance(upload, UploadFile):
        raise ValidationException(message="No se proporcionó ningún archivo", field="file")

    content = await upload.read()
    max_bytes = settings.IMPORT_MAX_FILE_SIZE_MB * 1024 * 1024
    if len(content) > max_bytes:
        raise ValidationException(
            message=f"El archivo es demasiado grande. Tamaño máximo: {settings.IMPORT_MAX_FILE_SIZE_MB}MB",
            field="file",
            invalid_value=upload.filename,
        )

    filename = upload.filename or "archivo_importado"
    rows = await read_upload(content, filename, settings.IMPORT_READ_TIMEOUT_SECONDS)
    return filename, rows


@router.post("/import-matriculados", summary="Importar matriculados")
async def import_enrollment(
    request: Request,
    service: EnrollmentImportService = Depends(get_enrollment_import_service),
) -> Dict[str, Any]:
    """
    Actualiza ``cantidad_alumnos`` de los cursos a partir del archivo.

    Returns:
        Dict con ``resultados`` por (RBD, año) y ``resumen``
    """
    filename, rows = await _rows_from_request(request)
    logger.info(f"🚀 Importando matriculados desde {filename}: {len(rows)} filas")
    result = await service.import_rows(rows)
    return {"success": True, "data": result}
