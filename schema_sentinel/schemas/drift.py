"""
Pydantic schemas for drift checks and drift reports.

A DriftCheck describes one monitored schema family. The detector turns it
into a DriftResult; results are aggregated into a DriftReport and persisted
as JSON.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field


SchemaFamily = Literal["wsdl", "message"]
UnreachablePolicy = Literal["drift", "advisory"]
DriftPolicy = Literal["symmetric", "breaking"]


class DriftCheck(BaseModel):
    """One monitored schema family.

    ``on_unreachable`` defaults to 'drift' for WSDL checks and 'advisory' for
    message checks when left unset.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    family: SchemaFamily
    baseline_path: str
    live_url: Optional[str] = None
    on_unreachable: Optional[UnreachablePolicy] = None
    policy: DriftPolicy = "symmetric"

    @property
    def unreachable_policy(self) -> UnreachablePolicy:
        if self.on_unreachable is not None:
            return self.on_unreachable
        return "drift" if self.family == "wsdl" else "advisory"


class DriftResult(BaseModel):
    """Result of a single drift check. Frozen once returned."""
    model_config = ConfigDict(frozen=True)

    schema_name: str
    drifted: bool
    details: List[str] = Field(default_factory=list)


class DriftSummary(BaseModel):
    total: int
    drifted: int
    clean: int


class DriftReport(BaseModel):
    """Aggregated drift results for one run. Frozen once built."""
    model_config = ConfigDict(frozen=True)

    timestamp: str = Field(..., description="ISO 8601 UTC timestamp of the run")
    results: List[DriftResult]

    @computed_field
    @property
    def summary(self) -> DriftSummary:
        drifted = sum(1 for r in self.results if r.drifted)
        return DriftSummary(
            total=len(self.results),
            drifted=drifted,
            clean=len(self.results) - drifted,
        )

    @property
    def has_drift(self) -> bool:
        return any(r.drifted for r in self.results)
