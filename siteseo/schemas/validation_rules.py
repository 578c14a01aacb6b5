"""Rule thresholds for the SEO validator.

Thresholds are data so hosts can override them per run; the validator
functions take the relevant rule block as an argument.
"""

from pydantic import BaseModel, Field


class TitleRules(BaseModel):
    min_length: int = 30
    max_length: int = 60
    must_include: list[str] = Field(default_factory=lambda: ["keyword", "location"])
    must_not_include: list[str] = Field(default_factory=lambda: ["|", " - ", "best"])


class DescriptionRules(BaseModel):
    min_length: int = 120
    max_length: int = 160
    must_include: list[str] = Field(default_factory=lambda: ["keyword"])


class HeadingRules(BaseModel):
    required: bool = True
    max_count: int = 1
    max_length: int = 70
    must_include: list[str] = Field(default_factory=lambda: ["keyword"])


class SchemaRules(BaseModel):
    required: list[str] = Field(default_factory=lambda: ["BreadcrumbList"])
    provider_required: list[str] = Field(
        default_factory=lambda: ["LocalBusiness", "AggregateRating"]
    )
    article_required: list[str] = Field(
        default_factory=lambda: ["Article", "FAQPage"]
    )


class LinkRule(BaseModel):
    min: int = Field(..., ge=0)


def _default_link_rules() -> dict[str, LinkRule]:
    return {
        "homepage": LinkRule(min=20),
        "service": LinkRule(min=15),
        "service_hub": LinkRule(min=15),
        "provider": LinkRule(min=8),
        "provider_profile": LinkRule(min=8),
        "guide": LinkRule(min=10),
        "cost_guide": LinkRule(min=10),
        "comparison": LinkRule(min=12),
        "article": LinkRule(min=10),
    }


class SeoValidationRules(BaseModel):
    """Complete rule set consumed by the per-page validator."""

    title: TitleRules = Field(default_factory=TitleRules)
    description: DescriptionRules = Field(default_factory=DescriptionRules)
    h1: HeadingRules = Field(default_factory=HeadingRules)
    schema_rules: SchemaRules = Field(default_factory=SchemaRules)
    internal_links: dict[str, LinkRule] = Field(default_factory=_default_link_rules)
    default_min_links: int = 5

    def min_links_for(self, page_type: str) -> int:
        rule = self.internal_links.get(page_type)
        return rule.min if rule is not None else self.default_min_links


DEFAULT_VALIDATION_RULES = SeoValidationRules()
