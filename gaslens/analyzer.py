"""
Gas Optimizer for Solidity contracts

Runs pattern-based gas checks over a parsed source tree and accumulates
improvement reports. Works on either tree shape through the views in
``gaslens.views``; checks that need type or expression data simply produce
nothing on the fallback tree.
"""

import logging
from collections import Counter
from typing import Callable, Dict, List, Optional, Tuple

from gaslens.config_manager import GasLensConfig, GasSchedule
from gaslens.report import Report
from gaslens.views import SourceTree

logger = logging.getLogger(__name__)


class GasOptimizer:
    """Analyzes a source tree for gas optimization opportunities"""

    def __init__(self, schedule: Optional[GasSchedule] = None, config: Optional[GasLensConfig] = None):
        self.config = config or GasLensConfig()
        self.schedule = schedule or self.config.schedule
        self.narrow_types = frozenset(self.config.narrow_types)
        self.checks = self._initialize_checks()
        self._reports: List[Report] = []

    def _initialize_checks(self) -> Dict[str, Callable[[SourceTree], List[Report]]]:
        """Map check names to detectors, in execution order"""
        return {
            'loop_storage_reads': self._detect_loop_storage_reads,
            'inefficient_types': self._detect_inefficient_types,
            'redundant_operations': self._detect_redundant_operations,
        }

    @property
    def reports(self) -> Tuple[Report, ...]:
        """Reports found so far, in discovery order"""
        return tuple(self._reports)

    def analyze(self, tree: SourceTree) -> None:
        """Run every enabled check over tree and append the findings"""
        for name, detect in self.checks.items():
            if name not in self.config.enabled_checks:
                continue
            found = detect(tree)
            logger.debug(f"{name}: {len(found)} report(s) on {tree.origin.value} tree")
            self._reports.extend(found)

    def total_savings(self) -> int:
        return sum(r.estimated_gas_savings for r in self._reports)

    def clear(self) -> None:
        self._reports.clear()

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    def _detect_loop_storage_reads(self, tree: SourceTree) -> List[Report]:
        """Detect the same storage value read more than once inside a loop"""
        reports = []
        per_read = self.schedule.cached_read_savings

        for loop in tree.loops():
            counts = Counter(access.label for access in tree.cached_accesses(loop))
            for label, count in counts.items():
                if count <= 1:
                    continue
                reports.append(Report(
                    issue=f"Variable '{label}' read {count} times in loop",
                    suggestion=f"Cache '{label}' in memory before loop",
                    estimated_gas_savings=(count - 1) * per_read,
                    location=loop.location,
                    check='loop_storage_reads',
                ))

        return reports

    def _detect_inefficient_types(self, tree: SourceTree) -> List[Report]:
        """Detect narrow unsigned integer declarations"""
        declarations = tree.declarations()
        if declarations is None:
            return []

        reports = []
        for decl in declarations:
            if decl.declared_type not in self.narrow_types:
                continue
            reports.append(Report(
                issue=f"Inefficient type '{decl.declared_type}' used for variable '{decl.name}'",
                suggestion="Use 'uint256' to avoid packing overhead unless tightly packed in a struct",
                estimated_gas_savings=self.schedule.narrow_type_penalty,
                location=decl.location,
                check='inefficient_types',
            ))

        return reports

    def _detect_redundant_operations(self, tree: SourceTree) -> List[Report]:
        """Detect identical simple expressions computed repeatedly in a function"""
        scopes = tree.function_scopes()
        if scopes is None:
            return []

        reports = []
        for scope in scopes:
            counts = Counter(expr.label for expr in scope.expressions)
            for label, count in counts.items():
                if count <= 1:
                    continue
                reports.append(Report(
                    issue=f"Expression '{label}' computed {count} times",
                    suggestion="Cache the result in a local variable",
                    estimated_gas_savings=count * self.schedule.redundant_expression,
                    location=scope.location,
                    check='redundant_operations',
                ))

        return reports
