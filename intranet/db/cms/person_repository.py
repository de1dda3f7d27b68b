"""
PersonRepository: canonical persons in the ``personas`` collection.
"""

import logging
from typing import Any, Dict, List

from intranet.db.cms.base import BaseRepository, log_operation
from intranet.domain.models import PhoneRecord

logger = logging.getLogger(__name__)


class PersonRepository(BaseRepository):
    """Repository for canonical person records."""

    collection = "personas"
    populate = {"populate": "*"}

    @log_operation()
    async def set_phones(self, identifier: Any, phones: List[PhoneRecord]) -> Dict[str, Any]:
        """
        Replace the phone component list of a person.

        Sent as its own PUT because the CMS rejects phone components inline
        on creation.
        """
        logger.debug(f"Setting {len(phones)} phones on persona {identifier}")
        return await self.update(identifier, {"telefonos": [phone.to_cms() for phone in phones]})
