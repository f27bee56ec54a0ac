"""Pydantic models for API inputs and outputs.

Layers / roles:
    BillSection    : One titled section of a bill with a prose description.
    BillRecord     : Canonical normalized record returned to clients.
    BillQuery      : Sparse search parameters posted to /api/search.
    ErrorEnvelope  : Error body returned by the exception handlers.
    HealthStatus   : Liveness probe body.

All public models serialize with camelCase aliases because the browser client
reads ``billNumber``, ``financialImplications`` and so on.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BillSection(_CamelModel):
    title: str
    description: str


class BillRecord(_CamelModel):
    """Normalized bill analysis.

    Every narrative field is always a plain string and the collections are
    always lists; the normalizer substitutes placeholders rather than leaving
    anything absent.
    """

    bill_number: str
    bill_name: str
    state: str
    year_introduced: Union[int, str]
    sponsors: Union[str, List[str]]
    cosponsors: Union[str, List[str]]
    committee: str
    summary: str
    financial_implications: str
    ideological_leaning: str
    advocacy_group_positions: str
    changes_to: str
    similar_laws: str
    other_factors: str
    sections: List[BillSection] = Field(default_factory=list)
    citations: List[str] = Field(default_factory=list)


class BillQuery(_CamelModel):
    """Search parameters; jurisdiction plus at least one descriptive hint.

    Everything is optional at the schema level so the workflow can answer a
    missing jurisdiction with its own message instead of a 422.
    """

    bill_name: Optional[str] = None
    bill_number: Optional[str] = None
    bill_state: Optional[str] = None
    bill_year: Optional[Union[int, str]] = None
    additional_info: Optional[str] = None


class ErrorEnvelope(BaseModel):
    error: str
    message: Optional[str] = None


class HealthStatus(BaseModel):
    status: str = "ok"
    message: str = "Server is running"
