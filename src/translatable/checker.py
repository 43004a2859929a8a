"""Schema repair checker for translatable record types.

Verifies that a record type is ready to store translations and offers to
migrate legacy values. Four stages run in order and the run stops at the
first failing one:

1. Capability    - the class declares a ``TranslationStore``.
2. Declarations  - an instance reports at least one translatable attribute.
3. Column types  - every translatable column is declared as wide text
                   (``text``/``mediumtext``/``longtext``/``clob``). A missing
                   table stops the run before the column report is built.
4. Values        - every stored value is empty or a JSON object. Other
                   values are proposed as ``{locale: raw_value}`` and, when
                   confirmed, written back one row at a time. BLOB values
                   are proposed as their UTF-8 text. Rows must carry the
                   model's ``key_name`` column.

Stage failures are reported, never raised: ``run()`` always returns a
``CheckReport`` whose ``outcome`` says where and how the run ended.
Database errors are not stage failures and propagate to the caller.

Scalability note: stage 4 loads the whole table into memory.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TextIO

from translatable.db import inspection, records_repo
from translatable.formatting import render_table, truncate
from translatable.store import TranslationStore, encode_translations, is_locale_map

logger = logging.getLogger(__name__)

# (prompt, default) -> answer
ConfirmFn = Callable[[str, bool], bool]


class CheckOutcome(str, Enum):
    """Where a checker run ended."""

    NOT_TRANSLATABLE = "not_translatable"
    NO_TRANSLATABLE_ATTRIBUTES = "no_translatable_attributes"
    MISSING_TABLE = "missing_table"
    INCOMPATIBLE_COLUMNS = "incompatible_columns"
    MISSING_KEY_COLUMN = "missing_key_column"
    VALUES_UNRESOLVED = "values_unresolved"
    REPAIRED = "repaired"
    COMPLIANT = "compliant"


@dataclass(slots=True)
class ColumnReport:
    """Stage 3 result for one translatable column."""

    column: str
    type: str
    compatible: bool


@dataclass(slots=True)
class RepairFinding:
    """Stage 4 result for one stored value that is not a locale map.

    Attributes:
        record_id: Primary key of the row.
        attribute: Translatable column name.
        raw_value: The value as stored.
        repaired_value: JSON text proposed as the replacement.
    """

    record_id: Any
    attribute: str
    raw_value: Any
    repaired_value: str


@dataclass
class CheckReport:
    """Everything a checker run found."""

    model: str
    outcome: CheckOutcome | None = None
    stages_run: list[int] = field(default_factory=list)
    columns: list[ColumnReport] = field(default_factory=list)
    findings: list[RepairFinding] = field(default_factory=list)
    repaired_rows: int = 0

    @property
    def passed(self) -> bool:
        """True when the model is fully compliant (possibly after repair)."""
        return self.outcome in (CheckOutcome.COMPLIANT, CheckOutcome.REPAIRED)

    @property
    def usable(self) -> bool:
        """True when the model can store translations, even with legacy values left."""
        return self.passed or self.outcome is CheckOutcome.VALUES_UNRESOLVED


class CheckOutput:
    """Line-oriented writer for staged checker output."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream if stream is not None else sys.stdout

    def line(self, text: str = "") -> None:
        print(text, file=self.stream)

    def info(self, text: str) -> None:
        self.line(text)

    def comment(self, text: str) -> None:
        self.line(f"  {text}")

    def warning(self, text: str) -> None:
        self.line(f"WARNING: {text}")

    def error(self, text: str) -> None:
        self.line(f"ERROR: {text}")

    def success(self, text: str) -> None:
        self.line(f"SUCCESS: {text}")

    def table(self, headers: list[str], rows: list[list[Any]]) -> None:
        self.line(render_table(headers, rows))


def ask_confirmation(prompt: str, default: bool = True) -> bool:
    """Ask a yes/no question on stdin; an empty answer picks ``default``."""
    suffix = " [Y/n] " if default else " [y/N] "
    while True:
        answer = input(prompt + suffix).strip().lower()
        if not answer:
            return default
        if answer in ("y", "yes"):
            return True
        if answer in ("n", "no"):
            return False
        print("Please answer 'yes' or 'no'.")


def _describe_fields(fields: list[str]) -> str:
    joined = '", "'.join(fields)
    noun = "fields" if len(fields) >= 2 else "field"
    return f'the "{joined}" {noun}'


def _as_text(raw_value: Any) -> Any:
    """Decode BLOB values to text; undecodable bytes become U+FFFD."""
    if isinstance(raw_value, bytes | bytearray):
        return bytes(raw_value).decode("utf-8", errors="replace")
    return raw_value


class SchemaRepairChecker:
    """Run the four-stage check against one record type.

    Args:
        model_class: The record type to check.
        locale: Locale assigned to legacy values; defaults to the store's
            active locale.
        output: Where staged output goes (stdout by default).
        confirm: Answers the repair question; defaults to an stdin prompt.
    """

    def __init__(
        self,
        model_class: type,
        *,
        locale: str | None = None,
        output: CheckOutput | None = None,
        confirm: ConfirmFn | None = None,
    ) -> None:
        self.model_class = model_class
        self.output = output if output is not None else CheckOutput()
        self.confirm = confirm if confirm is not None else ask_confirmation
        self._locale = locale
        self.report = CheckReport(model=f"{model_class.__module__}.{model_class.__qualname__}")

    # =========================================================================
    # ORCHESTRATION
    # =========================================================================

    def run(self) -> CheckReport:
        """Run every stage until one fails, then print the verdict."""
        stages: list[tuple[str, Callable[[], bool]]] = [
            ("Checking that the model declares a translation store...", self.check_capability),
            ("Checking for declared translatable attributes...", self.check_declarations),
            ("Checking the compatibility of columns in the database...", self.check_column_types),
            ("Checking the compatibility of stored values...", self.check_values),
        ]

        for step, (heading, stage) in enumerate(stages, start=1):
            self.output.line()
            self.output.line(f"[{step}]. {heading}")
            self.report.stages_run.append(step)
            logger.info(f"{self.report.model}: stage {step} started")

            if not stage():
                logger.info(f"{self.report.model}: stopped at stage {step} ({self.report.outcome})")
                break
        else:
            if self.report.outcome is None:
                self.report.outcome = CheckOutcome.COMPLIANT

        self._print_verdict()
        return self.report

    def _print_verdict(self) -> None:
        outcome = self.report.outcome
        if outcome is CheckOutcome.VALUES_UNRESOLVED:
            self.output.line()
            self.output.line("FINAL RESULT:")
            self.output.success(
                "OK. The model is translatable, but some values in the database "
                "have yet to determine their locale."
            )
        elif self.report.passed:
            self.output.line()
            self.output.line("FINAL RESULT:")
            self.output.success("Congratulations! Everything is good. The model is translatable.")

    @property
    def store(self) -> TranslationStore | None:
        store = getattr(self.model_class, "translations", None)
        return store if isinstance(store, TranslationStore) else None

    @property
    def locale(self) -> str:
        if self._locale is not None:
            return self._locale
        store = self.store
        return store.active_locale() if store is not None else ""

    # =========================================================================
    # STAGES
    # =========================================================================

    def check_capability(self) -> bool:
        """Stage 1: the record type declares a ``TranslationStore``."""
        if self.store is not None:
            self.output.info("Good. The model declares a translation store.")
            return True

        self.output.error("Failed. The model does not declare a translation store yet.")
        self.report.outcome = CheckOutcome.NOT_TRANSLATABLE
        return False

    def check_declarations(self) -> bool:
        """Stage 2: an instance reports at least one translatable attribute."""
        instance = self.model_class()
        if instance.translations.translatable_attributes:
            self.output.info("Good. The model has declared translatable attributes.")
            return True

        self.output.error("Not good. The model has not declared any translatable attributes yet.")
        self.report.outcome = CheckOutcome.NO_TRANSLATABLE_ATTRIBUTES
        return False

    def check_column_types(self) -> bool:
        """Stage 3: every translatable column is declared as wide text."""
        store = self.store
        table = getattr(self.model_class, "table", "")

        if not inspection.table_exists(table):
            self.output.error(f'Sorry! Table "{table}" of the model does not exist. Processing stops here.')
            self.report.outcome = CheckOutcome.MISSING_TABLE
            return False

        for column in inspection.get_columns(table):
            if store.is_translatable(column.name):
                self.report.columns.append(
                    ColumnReport(
                        column=column.name,
                        type=column.base_type,
                        compatible=column.is_wide_text,
                    )
                )

        self.output.table(
            ["Column name", "Column type", "Compatible ?"],
            [[report.column, report.type, report.compatible] for report in self.report.columns],
        )

        if all(report.compatible for report in self.report.columns):
            self.output.line()
            self.output.info(
                "Good. The required columns in the database already have compatible data types."
            )
            return True

        self.output.line()
        self.output.error(
            "Not good. Some database columns do not have a type able to store translations yet."
        )
        self.output.comment('Compatible data types are "text", "mediumtext", "longtext" and "clob".')
        self.output.comment("Please change the incompatible column types in the database.")
        self.report.outcome = CheckOutcome.INCOMPATIBLE_COLUMNS
        return False

    def check_values(self) -> bool:
        """Stage 4: every stored value is empty or a locale map; offer repairs."""
        store = self.store
        table = self.model_class.table
        key_name = getattr(self.model_class, "key_name", "id")
        fields = store.translatable_attributes
        locale = self.locale

        rows = records_repo.fetch_all(table)
        if not rows:
            self.output.info("Passed. The table does not have any records yet.")
            return True

        if key_name not in rows[0]:
            self.output.error(
                f'Failed. Table "{table}" has no "{key_name}" column to identify records.'
            )
            self.output.comment("Set key_name on the model to the table's primary key column.")
            self.report.outcome = CheckOutcome.MISSING_KEY_COLUMN
            return False

        for row in rows:
            for attribute in fields:
                raw_value = row.get(attribute)
                if is_locale_map(raw_value):
                    continue
                text = _as_text(raw_value)
                if text is None or text == "":
                    continue
                self.report.findings.append(
                    RepairFinding(
                        record_id=row.get(key_name),
                        attribute=attribute,
                        raw_value=raw_value,
                        repaired_value=encode_translations({locale: text}),
                    )
                )

        described = _describe_fields(fields)
        if not self.report.findings:
            self.output.info(f"Good. All values in {described} may have been translated.")
            return True

        self.output.warning(
            f"Not good. Perhaps a few values in {described} have yet to determine their locale."
        )
        self.output.table(
            [key_name, "Attribute", "Stored value"],
            [
                [finding.record_id, finding.attribute, truncate(str(finding.raw_value), 40)]
                for finding in self.report.findings
            ],
        )
        self.output.comment("This does not affect reading or writing translations.")
        self.output.comment("However, assigning a locale to these values makes the data complete.")

        prompt = f'Assign these values to the locale "{locale}"?'
        if not self.confirm(prompt, True):
            self.report.outcome = CheckOutcome.VALUES_UNRESOLVED
            return False

        self._apply_repairs(table, key_name)
        self.output.success(f"Repaired {self.report.repaired_rows} record(s).")
        self.report.outcome = CheckOutcome.REPAIRED
        return True

    def _apply_repairs(self, table: str, key_name: str) -> None:
        """Write proposed values, one update per record, without a shared transaction."""
        updates: dict[Any, dict[str, str]] = {}
        for finding in self.report.findings:
            updates.setdefault(finding.record_id, {})[finding.attribute] = finding.repaired_value

        for record_id, columns in updates.items():
            if records_repo.update_columns(table, key_name, record_id, columns):
                self.report.repaired_rows += 1
            logger.warning(f"Repaired {table} {key_name}={record_id!r}: {sorted(columns)}")
