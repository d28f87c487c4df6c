"""
Shared building blocks for the API schemas.

The published JSON contract is camelCase (``ipRange``, ``readyCommand``),
while Python code uses snake_case attribute names.  :class:`CamelModel`
bridges the two: it serialises with camelCase aliases and accepts either
spelling on input.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model with camelCase aliases and ``from_attributes`` support."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PortSchema(CamelModel):
    """An open port as reported by the scanner.

    Attributes:
        number: Port number.
        protocol: ``tcp`` or ``udp``.
        service: Scanner service name.
        version: Product and version string.
    """

    number: int = Field(..., ge=1, le=65535, examples=[445])
    protocol: str = Field(default="tcp", examples=["tcp"])
    service: Optional[str] = Field(default=None, examples=["microsoft-ds"])
    version: Optional[str] = None
