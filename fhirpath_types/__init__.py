"""FHIRPath value types: scalars, quantities, dates and times, collections and JSON objects."""

__version__ = "0.1.0"
__all__ = ["values", "collection", "quantity", "temporal", "fhirdatetime", "objects"]