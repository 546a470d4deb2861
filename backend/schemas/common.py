"""
Shared field types for request schemas
"""
from decimal import Decimal
from typing import Annotated

from pydantic import Field, PlainSerializer

# Finite decimal input; written back to JSON as a number so drafts round-trip
Amount = Annotated[
    Decimal,
    Field(allow_inf_nan=False),
    PlainSerializer(float, return_type=float, when_used="json"),
]
