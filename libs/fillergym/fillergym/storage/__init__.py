"""Report persistence handoff."""

from fillergym.storage.report_store import LocalReportStore, ReportSink

__all__ = ["LocalReportStore", "ReportSink"]
