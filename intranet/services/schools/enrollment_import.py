"""
Importación de matriculados (cantidad de alumnos por curso).

Lee un CSV/Excel (o filas JSON ya procesadas por la intranet), agrupa las
filas por (RBD, año) y actualiza ``cantidad_alumnos`` de cada curso
existente en el CMS. Las filas que no se pueden aplicar quedan como
errores en el resultado; la importación no se detiene por ellas.
"""

import asyncio
import io
import logging
import math
import re
from dataclasses import dataclass
from pathlib import PurePath
from typing import Any, Iterable, Optional

import pandas as pd

from intranet.db.cms import SchoolRepository
from intranet.utils.error_handler import TransportException, ValidationException, describe_error

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".csv", ".xlsx", ".xls"}

# Variantes de encabezado aceptadas, en orden de preferencia
YEAR_COLUMNS = ("agno", "AGNO", "año", "Año", "ano", "ANO")
RBD_COLUMNS = ("rbd", "RBD")
LEVEL_COLUMNS = ("nivel", "NIVEL")
LEVEL_ID_COLUMNS = ("id_nivel", "ID_NIVEL", "idNivel")
STUDENT_COLUMNS = ("N_ALU", "n_alu", "cantidad_alumnos", "Cantidad_Alumnos")

# Cursos que se actualizan en paralelo
UPDATE_BATCH_SIZE = 10

_ROMAN_GRADES = {"i": 1, "ii": 2, "iii": 3, "iv": 4, "1": 1, "2": 2, "3": 3, "4": 4}


def parse_level(level: Optional[str], level_id: Optional[int] = None) -> tuple[str, int]:
    """
    Nivel ("Basica" o "Media") y grado de un curso.

    ID_NIVEL de MINEDUC tiene prioridad: 12-15 son I a IV Medio, 4-11 son
    1° a 8° Básico y 1-3 se toman tal cual. Sin ID se interpreta el texto.

    Examples:
        >>> parse_level("", 13)
        ('Media', 2)
        >>> parse_level("III Medio")
        ('Media', 3)
        >>> parse_level("5° Básico")
        ('Basica', 5)
    """
    if level_id:
        if 12 <= level_id <= 15:
            return "Media", level_id - 11
        if 4 <= level_id <= 11:
            return "Basica", level_id - 3
        if 1 <= level_id <= 3:
            return "Basica", level_id

    text = str(level or "").strip().lower()

    if "medio" in text:
        roman = re.search(r"\b([ivxlcdm]+)\s*medio", text)
        if roman:
            return "Media", min(_ROMAN_GRADES.get(roman.group(1), 1), 4)
        digits = re.search(r"(\d+)", text)
        return "Media", min(int(digits.group(1)) if digits else 1, 4)

    if "basic" in text or "básic" in text:
        digits = re.search(r"(\d+)", text)
        return "Basica", min(int(digits.group(1)) if digits else 1, 8)

    return "Basica", 1


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def _first_value(row: dict[str, Any], columns: Iterable[str]) -> Any:
    for column in columns:
        value = row.get(column)
        if not _is_blank(value):
            return value
    return None


def _to_int(value: Any) -> Optional[int]:
    if _is_blank(value):
        return None
    try:
        return int(float(str(value).strip().replace(",", ".")))
    except ValueError:
        return None


def _to_text(value: Any) -> Optional[str]:
    if _is_blank(value):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


@dataclass
class EnrollmentRow:
    """Fila normalizada del archivo de matriculados."""

    rbd: Optional[str]
    year: Optional[int]
    level: Optional[str]
    level_id: Optional[int]
    students: Optional[int]

    @classmethod
    def from_raw(cls, row: dict[str, Any]) -> "EnrollmentRow":
        return cls(
            rbd=_to_text(_first_value(row, RBD_COLUMNS)),
            year=_to_int(_first_value(row, YEAR_COLUMNS)),
            level=_to_text(_first_value(row, LEVEL_COLUMNS)),
            level_id=_to_int(_first_value(row, LEVEL_ID_COLUMNS)),
            students=_to_int(_first_value(row, STUDENT_COLUMNS)),
        )

    @property
    def is_complete(self) -> bool:
        return bool(self.rbd) and bool(self.year) and bool(self.students)


def read_table(content: bytes, filename: str) -> pd.DataFrame:
    """
    Lee la primera hoja del archivo como texto.

    Raises:
        ValidationException: Extensión no soportada
    """
    extension = PurePath(filename or "").suffix.lower()
    if extension not in ALLOWED_EXTENSIONS:
        raise ValidationException(
            message="Tipo de archivo no válido. Se aceptan: .xlsx, .xls, .csv",
            field="file",
            invalid_value=filename,
            expected_format=", ".join(sorted(ALLOWED_EXTENSIONS)),
        )

    buffer = io.BytesIO(content)
    if extension == ".csv":
        return pd.read_csv(buffer, dtype=str, keep_default_na=False, sep=None, engine="python")
    engine = "openpyxl" if extension == ".xlsx" else "xlrd"
    return pd.read_excel(buffer, sheet_name=0, dtype=str, keep_default_na=False, engine=engine)


async def read_upload(content: bytes, filename: str, timeout: float) -> list[dict[str, Any]]:
    """
    Parse an uploaded file off the event loop, bounded by ``timeout`` seconds.

    Raises:
        ValidationException: Timeout, unsupported type or unreadable file
    """
    try:
        frame = await asyncio.wait_for(asyncio.to_thread(read_table, content, filename), timeout=timeout)
    except asyncio.TimeoutError as e:
        raise ValidationException(
            message=f"La lectura del archivo superó el tiempo máximo de {timeout:g} segundos",
            field="file",
            invalid_value=filename,
        ) from e
    except ValidationException:
        raise
    except Exception as e:
        raise ValidationException(
            message=f"No se pudo leer el archivo: {describe_error(e)}",
            field="file",
            invalid_value=filename,
        ) from e

    logger.info(f"📄 {filename}: {len(frame)} filas, columnas={list(frame.columns)}")
    return frame.to_dict(orient="records")


def group_rows(rows: Iterable[EnrollmentRow]) -> dict[str, dict[int, list[EnrollmentRow]]]:
    """RBD → año → filas; se omiten las filas sin RBD, año o cantidad."""
    grouped: dict[str, dict[int, list[EnrollmentRow]]] = {}
    skipped = 0
    for row in rows:
        if not row.is_complete:
            skipped += 1
            continue
        grouped.setdefault(row.rbd, {}).setdefault(row.year, []).append(row)
    if skipped:
        logger.warning(f"⚠️ {skipped} filas ignoradas por falta de RBD, año o N_ALU")
    return grouped


def _relation_id(value: Any) -> Any:
    if isinstance(value, dict):
        return value.get("id") or value.get("documentId")
    return value


class CourseIndex:
    """Cursos del CMS indexados por colegio-nivel-grado-año y colegio-nivel-grado."""

    def __init__(self, courses: Iterable[dict[str, Any]]):
        self._index: dict[str, dict[str, Any]] = {}
        for course in courses:
            school_id = _relation_id(course.get("colegio"))
            level = course.get("nivel")
            grade = course.get("grado")
            if not (school_id and level and grade):
                continue
            year = course.get("año") or course.get("ano")
            if year:
                self._index[f"{school_id}-{level}-{grade}-{year}"] = course
            self._index[f"{school_id}-{level}-{grade}"] = course

    def __len__(self) -> int:
        return len(self._index)

    def find(self, school_id: Any, level: str, grade: int, year: int) -> Optional[dict[str, Any]]:
        course = self._index.get(f"{school_id}-{level}-{grade}-{year}")
        if course is not None:
            return course

        course = self._index.get(f"{school_id}-{level}-{grade}")
        if course is None:
            return None
        course_year = course.get("año") or course.get("ano")
        if str(course_year) == str(year) or str(year) in (course.get("nombre_curso") or ""):
            return course
        return None


class EnrollmentImportService:
    """Applies enrollment rows to the CMS courses."""

    def __init__(self, school_repo: SchoolRepository):
        self.school_repo = school_repo

    async def import_rows(self, raw_rows: list[dict[str, Any]]) -> dict[str, Any]:
        """
        Import raw rows (file or JSON).

        Returns:
            dict: ``{resultados, resumen{totalColegios, totalCursosActualizados, totalErrores}}``

        Raises:
            ValidationException: No rows at all
        """
        if not raw_rows:
            raise ValidationException(
                message="El archivo debe contener al menos una fila de datos", field="datos", invalid_value=0
            )

        grouped = group_rows(EnrollmentRow.from_raw(row) for row in raw_rows)

        schools = await self.school_repo.all_schools()
        school_ids = {
            str(school["rbd"]).strip(): school.get("id") or school.get("documentId")
            for school in schools
            if school.get("rbd")
        }
        courses = CourseIndex(await self.school_repo.all_courses())
        logger.info(f"🏫 {len(school_ids)} colegios con RBD, {len(courses)} claves de curso indexadas")

        results = []
        for rbd, years in grouped.items():
            school_id = school_ids.get(rbd)
            if not school_id:
                results.append(
                    {
                        "rbd": rbd,
                        "año": 0,
                        "cursosActualizados": 0,
                        "errores": [f"Colegio con RBD {rbd} no encontrado en Strapi"],
                    }
                )
                continue

            for year, rows in years.items():
                updated, errors = await self._apply_year(rbd, school_id, year, rows, courses)
                results.append(
                    {
                        "rbd": rbd,
                        "colegioId": school_id,
                        "año": year,
                        "cursosActualizados": updated,
                        "errores": errors,
                    }
                )

        summary = {
            "totalColegios": len(grouped),
            "totalCursosActualizados": sum(result["cursosActualizados"] for result in results),
            "totalErrores": sum(len(result["errores"]) for result in results),
        }
        logger.info(f"✅ Importación de matriculados completada: {summary}")
        return {"resultados": results, "resumen": summary}

    async def _apply_year(
        self, rbd: str, school_id: Any, year: int, rows: list[EnrollmentRow], courses: CourseIndex
    ) -> tuple[int, list[str]]:
        updated = 0
        errors: list[str] = []

        for start in range(0, len(rows), UPDATE_BATCH_SIZE):
            batch = rows[start : start + UPDATE_BATCH_SIZE]
            outcomes = await asyncio.gather(*(self._apply_row(rbd, school_id, year, row, courses) for row in batch))
            for error in outcomes:
                if error is None:
                    updated += 1
                else:
                    errors.append(error)

        return updated, errors

    async def _apply_row(
        self, rbd: str, school_id: Any, year: int, row: EnrollmentRow, courses: CourseIndex
    ) -> Optional[str]:
        """None when the course was updated, otherwise the error message."""
        level, grade = parse_level(row.level, row.level_id)

        if not row.students or row.students <= 0:
            return f"Cantidad de alumnos inválida o cero para RBD {rbd}, nivel {row.level}"

        course = courses.find(school_id, level, grade, year)
        if course is None:
            return f"Curso no encontrado: {grade}º {level} {year}. Crea el curso primero con la importación de niveles."

        course_id = course.get("documentId") or course.get("id")
        try:
            await self.school_repo.update_course_enrollment(course_id, row.students)
        except TransportException as e:
            logger.error(f"❌ RBD {rbd}: error actualizando curso {course_id}: {describe_error(e)}")
            return f"Error al actualizar matriculados para curso {grade}º {level} {year}: {describe_error(e)}"

        logger.debug(f"Curso {course_id} (RBD {rbd}, {grade}º {level} {year}) → {row.students} alumnos")
        return None
