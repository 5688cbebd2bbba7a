"""
Main CLI implementation for GasLens.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from rich.console import Console
from rich.table import Table

from gaslens.adapter import load_tree
from gaslens.analyzer import GasOptimizer
from gaslens.compiler import SolcCompiler
from gaslens.config_manager import DEFAULT_CONFIG_FILE, ConfigManager
from gaslens.report import Report, summarize
from gaslens.views import SourceTree, TreeOrigin
from utils.file_handler import FileHandler

logger = logging.getLogger(__name__)


class GasLensCLI:
    """Main CLI class for GasLens."""

    def __init__(self, config_file: str = DEFAULT_CONFIG_FILE, console: Optional[Console] = None):
        self.version = "0.1.0"
        self.console = console or Console()
        self.file_handler = FileHandler()
        self.config_manager = ConfigManager(config_file)

    def show_version(self):
        """Display version information."""
        self.console.print(f"GasLens v{self.version}")

    def run_analysis(
        self,
        path: str,
        use_compiler: Optional[bool] = None,
        solc_version: Optional[str] = None,
        json_output: Optional[str] = None,
    ) -> int:
        """Analyze every Solidity file under path and print the reports.

        Returns the process exit code.
        """
        config = self.config_manager.config
        if use_compiler is not None:
            config.use_compiler = use_compiler
        if solc_version:
            config.solc_version = solc_version

        try:
            files = self.file_handler.read_contract_files(path)
        except (OSError, ValueError, UnicodeDecodeError) as e:
            self.console.print(f"[red]Error: {e}[/red]")
            return 1

        compiler = SolcCompiler(config.solc_version)
        exported = []
        for file_path, source in files:
            logger.info(f"Analyzing {file_path}")
            tree = load_tree(source, compiler=compiler, use_compiler=config.use_compiler)
            optimizer = GasOptimizer(config=config)
            optimizer.analyze(tree)
            self.print_reports(file_path, tree, optimizer.reports)
            exported.append({
                'file': file_path,
                'tree_origin': tree.origin.value,
                'reports': [r.to_dict() for r in optimizer.reports],
                'summary': summarize(optimizer.reports),
            })

        if json_output:
            self._write_json(json_output, exported)
        return 0

    def print_reports(self, file_path: str, tree: SourceTree, reports: Sequence[Report]) -> None:
        """Render reports for one file as a table."""
        origin = "solc AST" if tree.origin is TreeOrigin.COMPILER else "fallback parser"
        self.console.print(f"\n[bold]{file_path}[/bold] [dim]({origin})[/dim]")
        if tree.fallback_reason is not None:
            self.console.print(f"[yellow]Compiler not used: {tree.fallback_reason}[/yellow]")

        if not reports:
            self.console.print("No gas optimization opportunities found.")
            return

        table = Table(title="Gas Optimization Report")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Issue", style="cyan")
        table.add_column("Suggestion", style="green")
        table.add_column("Gas Savings", justify="right", style="magenta")
        table.add_column("Location", style="yellow")

        for i, r in enumerate(reports, start=1):
            table.add_row(str(i), r.issue, r.suggestion, str(r.estimated_gas_savings), r.location)

        self.console.print(table)
        total = summarize(reports)['total_gas_savings']
        self.console.print(f"Estimated total savings: [bold]{total}[/bold] gas")

    def _write_json(self, output_path: str, results: List[dict]) -> None:
        out = Path(output_path)
        out.parent.mkdir(parents=True, exist_ok=True)
        with open(out, 'w') as f:
            json.dump(results, f, indent=2)
        self.console.print(f"[green]Results written to {out}[/green]")
