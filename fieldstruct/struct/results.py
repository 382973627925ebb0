"""Result containers for bulk persistence."""

from pathlib import Path
from typing import NamedTuple

import polars as pl

from ..core.constants import FieldStatus
from ..core.format import THICK_SEP, adjust_separators, attach_format, format_kv_line, format_title, make_table


class FieldOutcome(NamedTuple):
    """Outcome of persisting one field.

    Attributes
    ----------
    name : str
        Field name.
    status : FieldStatus
        Whether the field was saved, skipped or failed.
    path : Path
        Target file.
    reason : str or None
        Why the field was skipped or failed; ``None`` when saved.
    """

    name: str
    status: FieldStatus
    path: Path
    reason: str | None = None


class PersistReport(NamedTuple):
    """Container for the per-field outcomes of persisting a struct.

    Attributes
    ----------
    directory : Path
        Target directory.
    outcomes : tuple of FieldOutcome
        One outcome per field, in field order.
    """

    directory: Path
    outcomes: tuple[FieldOutcome, ...] = ()

    @property
    def saved(self) -> tuple[str, ...]:
        """Names of fields written to disk."""
        return self._names_with(FieldStatus.SAVED)

    @property
    def skipped(self) -> tuple[str, ...]:
        """Names of fields left untouched because a file already existed."""
        return self._names_with(FieldStatus.SKIPPED)

    @property
    def failed(self) -> tuple[str, ...]:
        """Names of fields that could not be written."""
        return self._names_with(FieldStatus.FAILED)

    @property
    def success(self) -> bool:
        """True if no field failed."""
        return not self.failed

    def outcome(self, name: str) -> FieldOutcome:
        """Get the outcome for a field."""
        for item in self.outcomes:
            if item.name == name:
                return item
        raise KeyError(name)

    def to_dataframe(self) -> pl.DataFrame:
        """Convert to Polars DataFrame."""
        return pl.DataFrame(
            {
                "Field": [o.name for o in self.outcomes],
                "Status": [o.status.value for o in self.outcomes],
                "Path": [str(o.path) for o in self.outcomes],
                "Reason": [o.reason for o in self.outcomes],
            },
            schema={"Field": pl.String, "Status": pl.String, "Path": pl.String, "Reason": pl.String},
        )

    def _names_with(self, status):
        return tuple(o.name for o in self.outcomes if o.status is status)


def format_persist_report(report):
    """Format a persist report for display."""
    lines = format_title("Persist Report", f"Directory: {report.directory}")

    if report.outcomes:
        rows = [[o.name, o.status.value, o.reason or ""] for o in report.outcomes]
        lines.extend(["", *make_table(["Field", "Status", "Reason"], rows).split("\n")])
    else:
        lines.extend(["", " No fields."])

    lines.append("")
    lines.append(
        format_kv_line(
            "Saved / Skipped / Failed",
            f"{len(report.saved)} / {len(report.skipped)} / {len(report.failed)}",
        )
    )
    lines.append(THICK_SEP)
    return "\n".join(adjust_separators(lines))


attach_format(PersistReport, format_persist_report)
