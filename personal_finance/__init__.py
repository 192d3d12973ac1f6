"""Personal-finance calculation engines.

``personal_finance.calculators`` holds the engines themselves,
``personal_finance.tables`` loads the yearly rate tables they are fed with
and ``personal_finance.frames`` turns their results into DataFrames.
"""

from . import calculators, tables  # noqa: F401
from .exceptions import RateTableError  # noqa: F401

__version__ = "0.1.0"

__all__ = ["calculators", "tables", "RateTableError"]
