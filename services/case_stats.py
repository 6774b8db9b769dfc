"""Dashboard statistics over a collection of case records.

All functions are pure; mappings keep first-encountered key order so the
dashboard bars appear in the order dentists and materials were first seen.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence

from models.case_record import CaseRecord


@dataclass
class CaseStats:
    """Aggregates shown on the owner and doctor dashboards."""

    total_cases: int = 0
    total_teeth: int = 0
    total_material_selections: int = 0
    cases_by_dentist: Dict[str, int] = field(default_factory=dict)
    material_usage: Dict[str, int] = field(default_factory=dict)
    teeth_by_material: Dict[str, int] = field(default_factory=dict)
    prosthesis_type_distribution: Dict[str, int] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return self.total_cases == 0

    def to_dict(self) -> Dict[str, object]:
        """Render the stats as chart-ready rows."""
        return {
            "totalCases": self.total_cases,
            "totalTeeth": self.total_teeth,
            "totalMaterialSelections": self.total_material_selections,
            "casesByDentist": _rows(self.cases_by_dentist, "cases"),
            "materialUsage": _rows(self.material_usage, "count"),
            "teethByMaterial": _rows(self.teeth_by_material, "teeth"),
            "prosthesisTypeDistribution": _rows(self.prosthesis_type_distribution, "count"),
        }


def _rows(mapping: Dict[str, int], value_key: str) -> List[Dict[str, object]]:
    return [{"name": name, value_key: value} for name, value in mapping.items()]


def count_tokens(token_lists: Iterable[Sequence[str]]) -> Dict[str, int]:
    """Count every token occurrence across lists, in first-seen order."""
    counts: Dict[str, int] = {}
    for tokens in token_lists:
        for token in tokens:
            counts[token] = counts.get(token, 0) + 1
    return counts


def count_by_dentist(cases: Iterable[CaseRecord]) -> Dict[str, int]:
    """Count records per exact `dentist_name` (case-sensitive)."""
    counts: Dict[str, int] = {}
    for case in cases:
        counts[case.dentist_name] = counts.get(case.dentist_name, 0) + 1
    return counts


def teeth_by_material(cases: Iterable[CaseRecord]) -> Dict[str, int]:
    """Sum each record's tooth count into every material it lists.

    A record with two materials contributes its teeth to both, so the values
    can add up to more than the total number of teeth.
    """
    totals: Dict[str, int] = {}
    for case in cases:
        for material in case.materials:
            totals[material] = totals.get(material, 0) + case.tooth_count
    return totals


def compute_stats(cases: Sequence[CaseRecord]) -> CaseStats:
    """Compute every dashboard aggregate for `cases`.

    An empty collection yields zero totals and empty mappings.
    """
    return CaseStats(
        total_cases=len(cases),
        total_teeth=sum(case.tooth_count for case in cases),
        total_material_selections=sum(len(case.materials) for case in cases),
        cases_by_dentist=count_by_dentist(cases),
        material_usage=count_tokens(case.materials for case in cases),
        teeth_by_material=teeth_by_material(cases),
        prosthesis_type_distribution=count_tokens(case.prosthesis_types for case in cases),
    )
