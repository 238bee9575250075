"""
Seed data for initial database population.
Populates the airport catalog with the European airports served by the fare API.
"""

import logging
from typing import Dict, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from farescope.models.airport import Airport

logger = logging.getLogger(__name__)

EUROPEAN_AIRPORTS: List[Dict[str, str]] = [
    {"iata_code": "ATH", "name": "Athens International Airport", "city": "Athens", "country": "GR"},
    {"iata_code": "BER", "name": "Berlin Brandenburg Airport", "city": "Berlin", "country": "DE"},
    {"iata_code": "CDG", "name": "Paris Charles de Gaulle Airport", "city": "Paris", "country": "FR"},
    {"iata_code": "MAD", "name": "Adolfo Suarez Madrid-Barajas Airport", "city": "Madrid", "country": "ES"},
    {"iata_code": "FCO", "name": "Rome Fiumicino Airport", "city": "Rome", "country": "IT"},
    # Metropolitan code: the fare API accepts it for all London airports
    {"iata_code": "LON", "name": "London (all airports)", "city": "London", "country": "GB"},
    {"iata_code": "SKG", "name": "Thessaloniki Airport", "city": "Thessaloniki", "country": "GR"},
    {"iata_code": "HER", "name": "Heraklion International Airport", "city": "Heraklion", "country": "GR"},
    {"iata_code": "LCA", "name": "Larnaca International Airport", "city": "Larnaca", "country": "CY"},
    {"iata_code": "MUC", "name": "Munich Airport", "city": "Munich", "country": "DE"},
    {"iata_code": "BRU", "name": "Brussels Airport", "city": "Brussels", "country": "BE"},
    {"iata_code": "MXP", "name": "Milan Malpensa Airport", "city": "Milan", "country": "IT"},
]


async def seed_airports(db: AsyncSession) -> int:
    """
    Seed the airport catalog.

    Airports that already exist are skipped.

    Returns:
        Number of airports created
    """
    result = await db.execute(select(Airport.iata_code))
    existing = set(result.scalars().all())

    created = 0
    for airport_data in EUROPEAN_AIRPORTS:
        if airport_data["iata_code"] in existing:
            logger.info(f"Airport {airport_data['iata_code']} already exists, skipping")
            continue

        db.add(Airport(**airport_data))
        created += 1
        logger.info(f"Created airport: {airport_data['iata_code']} - {airport_data['name']}")

    await db.flush()
    logger.info(f"Airport seeding completed ({created} created)")
    return created
