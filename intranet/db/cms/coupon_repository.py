"""
CouponRepository: discount coupons in ``wo-cupones``.
"""

import logging
from typing import Optional

from intranet.db.cms.base import BaseRepository, log_operation
from intranet.domain.models import Coupon

logger = logging.getLogger(__name__)


class CouponRepository(BaseRepository):
    """Repository for coupon records."""

    collection = "wo-cupones"

    @log_operation()
    async def find_by_code(self, code: str) -> Optional[Coupon]:
        """Coupon by code (case-insensitive), or None."""
        records = await self.find({"filters[code][$eqi]": code.strip()})
        if not records:
            return None
        return Coupon.from_record(records[0])
