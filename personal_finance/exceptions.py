"""Exceptions raised by the calculators package."""


class RateTableError(ValueError):
    """A rate or threshold table is malformed or missing an entry.

    Calculation inputs never raise; they resolve to ``None`` or a flagged
    result record.  Configuration problems are programming errors and surface
    as this exception instead.
    """
