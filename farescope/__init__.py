"""
FareScope - airfare price collector and route statistics.

Collects low-fare quotes for configured airport groups, stores them, and
reports descriptive statistics per route.
"""

__version__ = "0.1.0"
__app_name__ = "FareScope"
