"""
Report model for gas optimization findings.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable


@dataclass(frozen=True)
class Report:
    """One optimization suggestion"""
    issue: str
    suggestion: str
    estimated_gas_savings: int
    location: str
    check: str = ""

    def __post_init__(self):
        if self.estimated_gas_savings < 0:
            raise ValueError(f"estimated_gas_savings must be non-negative, got {self.estimated_gas_savings}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def summarize(reports: Iterable[Report]) -> Dict[str, Any]:
    """Count reports and add up savings, overall and per check."""
    summary: Dict[str, Any] = {
        'total_reports': 0,
        'total_gas_savings': 0,
        'by_check': {},
    }
    for report in reports:
        summary['total_reports'] += 1
        summary['total_gas_savings'] += report.estimated_gas_savings
        entry = summary['by_check'].setdefault(report.check, {'reports': 0, 'gas_savings': 0})
        entry['reports'] += 1
        entry['gas_savings'] += report.estimated_gas_savings
    return summary
