"""
Specimen selection and aggregation behind the PV (provisional, up to 7 days)
and RP (final, full history) test reports.
"""

import re
from statistics import mean
from typing import Dict, Iterable, List, Optional, Union

from .constants import (
    CHARACTERISTIC_AGE, EARLY_AGE, EARLY_STRENGTH_RATIO,
    MISSING_VALUE_PLACEHOLDER, PROVISIONAL_MAX_AGE
)
from .enums import ReportVariant, SpecimenShape
from .models import (
    AgeSummary, ConformityAssessment, ConformityVerdict, ReportRow, ReportView
)
from concrete_lab.schemas.concrete_test import ConcreteTest
from concrete_lab.schemas.specimen import Specimen

STRENGTH_CLASS_PATTERN = re.compile(r"C(\d+)\s*/\s*(\d+)", re.IGNORECASE)

REPORT_TITLES = {
    ReportVariant.PROVISIONAL: "PROCÈS VERBAL D'ESSAIS (PROVISOIRE)",
    ReportVariant.FINAL: "RAPPORT D'ESSAIS SUR BÉTON DURCI",
}


def _format(value: Optional[float], decimals: int) -> str:
    if value is None:
        return MISSING_VALUE_PLACEHOLDER
    return f"{value:.{decimals}f}"


class ReportSelector:

    @staticmethod
    def select_specimens(specimens: Iterable[Specimen], variant: Union[ReportVariant, str]) -> List[Specimen]:
        """PV keeps ages up to 7 days, RP keeps everything; sorted by number."""
        variant = ReportVariant(variant)
        if variant == ReportVariant.PROVISIONAL:
            selected = [s for s in specimens if s.age <= PROVISIONAL_MAX_AGE]
        else:
            selected = list(specimens)
        return sorted(selected, key=lambda s: s.number)

    @staticmethod
    def report_rows(specimens: Iterable[Specimen]) -> List[ReportRow]:
        return [
            ReportRow(
                number=s.number,
                age=s.age,
                casting_date=s.casting_date,
                crushing_date=s.crushing_date,
                specimen_type=s.specimen_type,
                diameter=s.diameter,
                height=s.height,
                weight=s.weight,
                force=s.force,
                stress=s.stress,
                density=s.density,
                stress_display=_format(s.stress, 1),
                density_display=_format(s.density, 0),
            )
            for s in specimens
        ]

    @staticmethod
    def group_by_age(specimens: Iterable[Specimen]) -> Dict[int, List[Specimen]]:
        groups: Dict[int, List[Specimen]] = {}
        for s in specimens:
            groups.setdefault(s.age, []).append(s)
        return {age: groups[age] for age in sorted(groups)}

    @staticmethod
    def age_summaries(specimens: Iterable[Specimen]) -> List[AgeSummary]:
        """Mean stress and density per age over the specimens that have them."""
        summaries = []
        for age, group in ReportSelector.group_by_age(specimens).items():
            stresses = [s.stress for s in group if s.stress is not None]
            densities = [s.density for s in group if s.density is not None]
            summaries.append(AgeSummary(
                age=age,
                specimen_count=len(group),
                tested_count=len(stresses),
                mean_stress=mean(stresses) if stresses else None,
                mean_density=mean(densities) if densities else None,
            ))
        return summaries

    @staticmethod
    def target_strength(concrete_class: Optional[str], shape: SpecimenShape) -> Optional[float]:
        """fck from a class like C25/30: 25 on cylinders, 30 on cubes."""
        if not concrete_class:
            return None
        match = STRENGTH_CLASS_PATTERN.search(concrete_class)
        if not match:
            return None
        cylinder, cube = float(match.group(1)), float(match.group(2))
        return cube if SpecimenShape(shape) == SpecimenShape.CUBIC else cylinder

    @staticmethod
    def assess_conformity(concrete_class: Optional[str], specimens: List[Specimen]) -> ConformityAssessment:
        """
        Probable conformity at 7 days (mean >= 70% of fck) and conformity at
        28 days (mean >= fck). A verdict is None when its age has no result.
        """
        if not specimens:
            return ConformityAssessment()
        target = ReportSelector.target_strength(concrete_class, specimens[0].specimen_type)
        if target is None:
            return ConformityAssessment()

        return ConformityAssessment(
            target_strength=target,
            early=ReportSelector._verdict(specimens, EARLY_AGE, target, target * EARLY_STRENGTH_RATIO),
            characteristic=ReportSelector._verdict(specimens, CHARACTERISTIC_AGE, target, target),
        )

    @staticmethod
    def _verdict(specimens: List[Specimen], age: int, target: float, required: float) -> Optional[ConformityVerdict]:
        stresses = [s.stress for s in specimens if s.age == age and s.stress is not None]
        if not stresses:
            return None
        avg = mean(stresses)
        return ConformityVerdict(
            age=age,
            mean_stress=avg,
            target_strength=target,
            required_stress=required,
            percent_of_target=avg / target * 100,
            is_conform=avg >= required,
        )

    @staticmethod
    def build_report(test: ConcreteTest, variant: Union[ReportVariant, str]) -> ReportView:
        variant = ReportVariant(variant)
        selected = ReportSelector.select_specimens(test.specimens, variant)
        return ReportView(
            test_id=test.id,
            test_reference=test.reference,
            variant=variant,
            title=REPORT_TITLES[variant],
            rows=ReportSelector.report_rows(selected),
            age_summaries=ReportSelector.age_summaries(selected),
            conformity=ReportSelector.assess_conformity(test.concrete_class, selected),
        )
