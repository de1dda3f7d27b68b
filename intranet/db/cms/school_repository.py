"""
SchoolRepository: schools (``colegios``) and their courses (``cursos``).
"""

import logging
from typing import Any, Dict, List

from intranet.db.cms.base import BaseRepository, log_operation

logger = logging.getLogger(__name__)

SCHOOLS_PAGE_SIZE = 10000


class SchoolRepository(BaseRepository):
    """Repository for schools and courses used by the enrollment import."""

    collection = "colegios"
    courses_collection = "cursos"

    @log_operation()
    async def all_schools(self) -> List[Dict[str, Any]]:
        return await self.strapi.find(self.collection, {"pagination[pageSize]": SCHOOLS_PAGE_SIZE})

    @log_operation()
    async def all_courses(self) -> List[Dict[str, Any]]:
        return await self.strapi.find(
            self.courses_collection,
            {"populate[colegio]": "true", "pagination[pageSize]": SCHOOLS_PAGE_SIZE},
        )

    @log_operation()
    async def update_course_enrollment(self, course_identifier: Any, students: int) -> Dict[str, Any]:
        return await self.strapi.update(self.courses_collection, course_identifier, {"cantidad_alumnos": students})
