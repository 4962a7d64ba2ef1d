"""
Run report rendering.

Turns a finished RunReport into the human readable summary printed at the
end of a run, or into a JSON-friendly dict for log shippers:
- per-category block (categories that processed at least one record)
- overall summary and status distribution
- recommendations derived from the totals
"""

from __future__ import annotations

from typing import Any, Dict, List

from .stats import CategoryOutcome, RunReport

RULE = "=" * 80


def _rate(success: int, total: int) -> str:
    return f"{(success / total) * 100:.1f}" if total > 0 else "0"


def build_recommendations(report: RunReport) -> List[str]:
    totals = report.totals
    recommendations = []
    if totals.failed > 0:
        recommendations.append(f"Review {totals.failed} failed records in the logs above")
        recommendations.append("Check data validation rules and database constraints")
    if totals.pending > 0:
        recommendations.append(f"{totals.pending} records need review (pending admin approval)")
        recommendations.append("Use the admin panel to review and approve/reject these records")
    failed_categories = report.failed_categories
    if failed_categories:
        names = ", ".join(o.category.value for o in failed_categories)
        recommendations.append(
            f"Re-run to retry {len(failed_categories)} failed categories ({names})"
        )
    recommendations.append(f"Monitor system performance with {totals.success} new records")
    return recommendations


def _category_block(outcome: CategoryOutcome) -> List[str]:
    stats = outcome.stats
    lines = [
        "",
        f"{outcome.category.label}:",
        f"   Total Records: {stats.total}",
        f"   Successfully Loaded: {stats.success}",
        f"   Pending Status: {stats.pending}",
        f"   Failed: {stats.failed}",
        f"   Skipped (Duplicates): {stats.skipped}",
        f"   Success Rate: {_rate(stats.success, stats.total)}%",
    ]
    if outcome.deleted:
        lines.append(f"   Deleted Before Ingest: {outcome.deleted}")
    return lines


def render_report(report: RunReport) -> str:
    """Multi-line statistics report for a run."""
    totals = report.totals
    lines = [
        RULE,
        "DATA INGESTION AND LOADING STATISTICS REPORT",
        RULE,
        f"Mode: {report.mode.value}",
        f"Report Generated: {report.timestamp}",
        f"Processing Time: {report.duration_seconds:.2f} seconds",
        RULE,
    ]

    for outcome in report.outcomes:
        if outcome.stats.total > 0:
            lines.extend(_category_block(outcome))

    if report.failed_categories:
        lines.append("")
        lines.append("CATEGORY ERRORS:")
        for outcome in report.failed_categories:
            lines.append(
                f"   {outcome.category.label}: {type(outcome.error).__name__}: {outcome.error}"
            )

    lines.extend([
        "",
        RULE,
        "OVERALL SUMMARY",
        RULE,
        f"Total Records Processed: {totals.total}",
        f"Total Successfully Loaded: {totals.success}",
        f"Total Pending Status: {totals.pending}",
        f"Total Failed: {totals.failed}",
        f"Total Skipped: {totals.skipped}",
        f"Overall Success Rate: {_rate(totals.success, totals.total)}%",
        "",
        "STATUS DISTRIBUTION:",
        "   Active Records: 0 (all new records start as pending)",
        f"   Pending Records: {totals.pending} (awaiting admin approval)",
        f"   Failed Records: {totals.failed}",
        "",
        "RECOMMENDATIONS:",
    ])
    lines.extend(f"   - {r}" for r in build_recommendations(report))
    lines.extend(["", RULE, "REPORT COMPLETE", RULE])
    return "\n".join(lines)


def report_to_dict(report: RunReport) -> Dict[str, Any]:
    totals = report.totals
    return {
        "run_id": report.run_id,
        "mode": report.mode.value,
        "started_at": report.started_at.isoformat(),
        "finished_at": report.finished_at.isoformat() if report.finished_at else None,
        "duration_seconds": report.duration_seconds,
        "summary": {
            "total": totals.total,
            "success": totals.success,
            "failed": totals.failed,
            "skipped": totals.skipped,
            "pending": totals.pending,
            "deleted": report.total_deleted,
            "success_rate": round(totals.success_rate, 1),
            "categories_failed": len(report.failed_categories),
        },
        "categories": [
            {
                "category": o.category.value,
                "ok": o.ok,
                "total": o.stats.total,
                "success": o.stats.success,
                "failed": o.stats.failed,
                "skipped": o.stats.skipped,
                "pending": o.stats.pending,
                "deleted": o.deleted,
                "error": f"{type(o.error).__name__}: {o.error}" if o.error else None,
                "duration_seconds": o.duration_seconds,
            }
            for o in report.outcomes
        ],
        "recommendations": build_recommendations(report),
    }
