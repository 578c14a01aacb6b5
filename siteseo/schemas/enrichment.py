"""Pydantic schemas for optional enrichment inputs and the run request.

Enrichments are produced by upstream content stages and passed through to
the output package untouched; the optimizer only reads headings and FAQs
from them.
"""

from typing import Any

from pydantic import BaseModel, Field

from siteseo.schemas.blueprint import Blueprint, Provider


class FAQItem(BaseModel):
    """A question/answer pair."""

    question: str = Field(..., min_length=1)
    answer: str = Field("")


class EditorialSection(BaseModel):
    """A section of editorial content; its heading becomes an H2 (or H3)."""

    heading: str
    body: str = ""
    subsections: list["EditorialSection"] = Field(default_factory=list)


class EditorialPage(BaseModel):
    """Generated editorial content for one page."""

    page_id: str = Field(..., min_length=1)
    headline: str = Field("", description="Page headline, used as the H1")
    sections: list[EditorialSection] = Field(default_factory=list)
    faq: list[FAQItem] = Field(default_factory=list)
    body: Any = Field(None, description="Opaque rendered content")


class ComparisonPage(BaseModel):
    """Generated comparison content for one page."""

    page_id: str = Field(..., min_length=1)
    faq: list[FAQItem] = Field(default_factory=list)
    content: Any = Field(None, description="Opaque comparison content")


class SeoOptimizationInput(BaseModel):
    """Everything one optimization run reads."""

    blueprint: Blueprint
    editorial_content: dict[str, EditorialPage] = Field(
        default_factory=dict,
        description="Editorial content keyed by page id",
    )
    comparison_data: dict[str, ComparisonPage] = Field(
        default_factory=dict,
        description="Comparison content keyed by page id",
    )
    providers: dict[str, Provider] = Field(
        default_factory=dict,
        description="Provider records keyed by id; override blueprint providers",
    )

    def provider_map(self) -> dict[str, Provider]:
        """Blueprint providers merged with explicit provider records."""
        merged = {p.id: p for p in self.blueprint.providers}
        merged.update(self.providers)
        return merged
