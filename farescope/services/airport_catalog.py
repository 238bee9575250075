"""
Airport catalog lookups.

Resolves an airport group's code list (or the literal ``ALL``) into the
airport records a planning run works on, flagging the group's targets.
"""

import logging
from typing import Iterable, List, Sequence, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from farescope.config import ALL_AIRPORTS
from farescope.models.airport import Airport
from farescope.models.domain import AirportRecord

logger = logging.getLogger(__name__)


class AirportCatalog:
    """Read access to the ``airports`` table."""

    @staticmethod
    async def resolve(
        db: AsyncSession,
        airports: Union[Sequence[str], str],
        targets: Iterable[str] = (),
    ) -> List[AirportRecord]:
        """
        Resolve requested airports against the catalog.

        Args:
            db: Database session
            airports: IATA codes, or 'ALL' for every airport in the catalog
            targets: IATA codes to flag as targets; codes that are not among
                the resolved airports simply never match

        Returns:
            AirportRecord list. 'ALL' is ordered by IATA code; an explicit
            list keeps the requested order. Requested codes missing from the
            catalog are skipped.

        Raises:
            sqlalchemy.exc.SQLAlchemyError: If the catalog cannot be read
        """
        if airports == ALL_AIRPORTS:
            result = await db.execute(select(Airport.iata_code).order_by(Airport.iata_code))
            codes = list(result.scalars().all())
        else:
            requested = list(dict.fromkeys(airports))
            if not requested:
                return []

            result = await db.execute(
                select(Airport.iata_code).where(Airport.iata_code.in_(requested))
            )
            known = set(result.scalars().all())

            missing = [code for code in requested if code not in known]
            if missing:
                logger.warning(f"Airports not in catalog, skipped: {', '.join(missing)}")

            codes = [code for code in requested if code in known]

        target_codes = set(targets)
        records = [AirportRecord(code=code, is_target=code in target_codes) for code in codes]

        logger.debug(
            f"Resolved {len(records)} airports "
            f"({sum(1 for r in records if r.is_target)} targets)"
        )
        return records

    @staticmethod
    async def list_codes(db: AsyncSession) -> List[str]:
        """Return every IATA code in the catalog, sorted."""
        result = await db.execute(select(Airport.iata_code).order_by(Airport.iata_code))
        return list(result.scalars().all())
