"""
Pydantic v2 schemas for rule corpus documents.

Each JSON document in the corpus describes one service.  Keys use the
camelCase spelling of the published format (``serviceNames``,
``targetOs``); the snake_case field names are accepted too.  Optional
fields that are missing or explicitly ``null`` are filled with empty
defaults so that no ``None`` leaks into the domain model.

The schema is deliberately tolerant: phase names and prerequisite strings
are accepted verbatim and interpreted later by the evaluation engine.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _none_to_empty_list(value: Any) -> Any:
    return [] if value is None else value


def _none_to_empty_str(value: Any) -> Any:
    return "" if value is None else value


class CommandDocument(BaseModel):
    """A command entry inside a vector.

    Attributes:
        tool: Executable name.  May be empty; the loader then derives it
            from :attr:`syntax`.
        syntax: Command line with placeholders.
        description: Optional note for the operator.
    """

    tool: str = ""
    syntax: str = ""
    description: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("tool", "syntax", mode="before")
    @classmethod
    def fill_strings(cls, value: Any) -> Any:
        """Treat ``null`` strings as empty."""
        return _none_to_empty_str(value)


class VectorDocument(BaseModel):
    """An attack vector entry.

    Attributes:
        id: Identifier unique within the document.
        name: Display name.
        phase: Free-form phase label as written by the corpus author.
        prerequisites: Phase keyword and/or acquired-item requirements.
        description: Explanation of the technique.
        commands: Commands implementing the technique.
        outcomes: Plain-string outcome labels.
    """

    id: str = ""
    name: str = ""
    phase: str = ""
    prerequisites: list[str] = Field(default_factory=list)
    description: str = ""
    commands: list[CommandDocument] = Field(default_factory=list)
    outcomes: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")

    @field_validator("id", "name", "phase", "description", mode="before")
    @classmethod
    def fill_strings(cls, value: Any) -> Any:
        """Treat ``null`` strings as empty."""
        return _none_to_empty_str(value)

    @field_validator("prerequisites", "commands", "outcomes", mode="before")
    @classmethod
    def fill_lists(cls, value: Any) -> Any:
        """Treat ``null`` lists as empty."""
        return _none_to_empty_list(value)


class ServiceRuleDocument(BaseModel):
    """Top-level rule document for one service.

    Attributes:
        service: Service display name.
        description: Short description.
        ports: Ports the service listens on; empty for general guidance.
        service_names: Scanner service-name aliases (``serviceNames``).
        target_os: Applicable operating systems (``targetOs``).
        vectors: Attack vectors.
    """

    service: str = ""
    description: str = ""
    ports: list[int] = Field(default_factory=list)
    service_names: list[str] = Field(default_factory=list, alias="serviceNames")
    target_os: list[str] = Field(default_factory=list, alias="targetOs")
    vectors: list[VectorDocument] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("service", "description", mode="before")
    @classmethod
    def fill_strings(cls, value: Any) -> Any:
        """Treat ``null`` strings as empty."""
        return _none_to_empty_str(value)

    @field_validator("ports", "service_names", "target_os", "vectors", mode="before")
    @classmethod
    def fill_lists(cls, value: Any) -> Any:
        """Treat ``null`` lists as empty."""
        return _none_to_empty_list(value)
