from pydantic import Field, model_validator

from entityschema.models.base import SpecModel
from entityschema.models.enums import RuleKind

SEARCH_SCENARIO = "search"


class ValidationRule(SpecModel):
    attributes: list[str]
    kind: RuleKind
    max: int | None = None
    integer_only: bool | None = None
    scenario: str | None = None


class ValidationRuleSet(SpecModel):
    """Attribute names grouped by the validation each one needs.

    ``length_buckets`` maps a maximum string length to the attributes
    sharing it, in declaration order.
    """

    required_names: list[str] = Field(default_factory=list)
    integer_names: list[str] = Field(default_factory=list)
    length_buckets: dict[int, list[str]] = Field(default_factory=dict)
    search_safe_names: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _validate_disjoint(self) -> "ValidationRuleSet":
        bucketed = {name for names in self.length_buckets.values() for name in names}
        overlap = sorted(bucketed & set(self.integer_names))
        if overlap:
            raise ValueError(f"integer attributes cannot carry length rules: {overlap}")
        return self

    def rules(self) -> list[ValidationRule]:
        """Render the rule set as an ordered list of validation rules."""
        rules: list[ValidationRule] = []
        if self.required_names:
            rules.append(ValidationRule(attributes=list(self.required_names), kind=RuleKind.REQUIRED))
        if self.integer_names:
            rules.append(
                ValidationRule(
                    attributes=list(self.integer_names),
                    kind=RuleKind.NUMERICAL,
                    integer_only=True,
                )
            )
        for max_size, names in self.length_buckets.items():
            rules.append(ValidationRule(attributes=list(names), kind=RuleKind.LENGTH, max=max_size))
        if self.search_safe_names:
            rules.append(
                ValidationRule(
                    attributes=list(self.search_safe_names),
                    kind=RuleKind.SAFE,
                    scenario=SEARCH_SCENARIO,
                )
            )
        return rules


__all__ = ["ValidationRule", "ValidationRuleSet", "SEARCH_SCENARIO"]
