"""
Hotel dataset loading.

Responsibilities:
- Read the cleaned hotels table (``hotels_clean.csv``).
- Coerce numeric columns, defaulting unparseable cells to 0.
- Hand the engine an ordered list of raw hotel records.
"""
