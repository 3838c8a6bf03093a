from pathlib import Path
from typing import List, Union

from pydantic import TypeAdapter

from metrics_monitor.models.reports import Report

_HISTORY_ADAPTER = TypeAdapter(List[Report])

LATEST_REPORTS_FILE = "latest_reports.json"


class ReportStore:
    """
    Write reports as JSON files below a directory.

    Each report lands in report_<id>.json; latest_reports.json is rewritten
    with the retained history on every save. Files are never read back.
    Raises OSError if the directory or a file cannot be written.
    """

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def report_path(self, report: Report) -> Path:
        return self.directory / f"report_{report.id}.json"

    def save(self, report: Report, history: List[Report]) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self.report_path(report).write_text(
            report.model_dump_json(indent=2), encoding="utf-8"
        )
        (self.directory / LATEST_REPORTS_FILE).write_bytes(
            _HISTORY_ADAPTER.dump_json(history, indent=2)
        )
