"""
Outcome classification and the results table.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from .schemas import ListStepsResponse, Outcome, TestStep

# (attribute, label) pairs in the order the flags are appended
FAILURE_FLAGS = [
    ("crashed", "Crashed"),
    ("not_installed", "NotInstalled"),
    ("other_native_crash", "OtherNativeCrash"),
    ("timed_out", "TimedOut"),
    ("unable_to_crawl", "UnableToCrawl"),
]
INCONCLUSIVE_FLAGS = [
    ("aborted_by_user", "AbortedByUser"),
    ("infrastructure_failure", "InfrastructureFailure"),
]
SKIPPED_FLAGS = [
    ("incompatible_app_version", "IncompatibleAppVersion"),
    ("incompatible_architecture", "IncompatibleArchitecture"),
    ("incompatible_device", "IncompatibleDevice"),
]

OUTCOME_STYLES = {
    "success": "green",
    "failure": "red",
    "inconclusive": "yellow",
    "skipped": "blue",
}

COLUMNS = ("Model", "API Level", "Locale", "Orientation", "Outcome")


@dataclass
class ReportRow:
    """One row of the results table."""

    model: str
    api_level: str
    locale: str
    orientation: str
    outcome: str
    summary: str
    failed: bool


@dataclass
class RunReport:
    """All rows of a finished run and the overall result."""

    rows: List[ReportRow] = field(default_factory=list)

    @property
    def successful(self) -> bool:
        return not any(row.failed for row in self.rows)

    @property
    def failed_count(self) -> int:
        return sum(1 for row in self.rows if row.failed)


def _flags(detail: Optional[object], flags: Sequence[Tuple[str, str]]) -> str:
    if detail is None:
        return ""
    return "".join(f"({label})" for attr, label in flags if getattr(detail, attr))


def classify_outcome(outcome: Optional[Outcome]) -> Tuple[str, bool]:
    """
    Build the outcome label and decide whether it fails the run.

    Failure, inconclusive and skipped outcomes fail the run and get their
    detail flags appended, e.g. `failure(Crashed)(TimedOut)`. Any other
    summary is passed through unchanged.
    """
    if outcome is None:
        return "", False

    summary = outcome.summary
    if summary == "failure":
        return summary + _flags(outcome.failure_detail, FAILURE_FLAGS), True
    elif summary == "inconclusive":
        return summary + _flags(outcome.inconclusive_detail, INCONCLUSIVE_FLAGS), True
    elif summary == "skipped":
        return summary + _flags(outcome.skipped_detail, SKIPPED_FLAGS), True
    return summary, False


def build_row(step: TestStep) -> ReportRow:
    dimensions = step.dimensions()
    label, failed = classify_outcome(step.outcome)
    return ReportRow(
        model=dimensions.get("Model", ""),
        api_level=dimensions.get("Version", ""),
        locale=dimensions.get("Locale", ""),
        orientation=dimensions.get("Orientation", ""),
        outcome=label,
        summary=step.outcome.summary if step.outcome else "",
        failed=failed,
    )


def build_report(response: ListStepsResponse) -> RunReport:
    return RunReport(rows=[build_row(step) for step in response.steps])


def render_table(report: RunReport) -> Table:
    table = Table(title="Test results", show_header=True, header_style="bold")
    for column in COLUMNS:
        table.add_column(column)

    for row in report.rows:
        outcome = Text(row.outcome, style=OUTCOME_STYLES.get(row.summary, ""))
        table.add_row(escape(row.model), escape(row.api_level), escape(row.locale), escape(row.orientation), outcome)
    return table


class ResultReporter:
    """Prints the results table of a finished run."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def report(self, response: ListStepsResponse) -> RunReport:
        report = build_report(response)
        self.console.print(render_table(report))

        if report.successful:
            self.console.print(f"[green]✅ All {len(report.rows)} test execution(s) succeeded[/green]")
        else:
            self.console.print(f"[red]❌ {report.failed_count}/{len(report.rows)} test execution(s) did not succeed[/red]")
        return report
