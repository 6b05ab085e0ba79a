"""Shared schema types."""

from typing import Annotated

from pydantic import BeforeValidator


def _zero_if_empty(value):
    return 0.0 if value is None or value == "" else value


# Query columns come back as null for missing days
Number = Annotated[float, BeforeValidator(_zero_if_empty)]

# Year / date columns arrive as numbers from some queries
Label = Annotated[str, BeforeValidator(str)]
