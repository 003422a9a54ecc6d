"""
Workspace Walker.

Walks a directory tree depth-first and validates every JSON/GeoJSON file
it finds. Directory entries are visited in lexical order, with
sub-directories descended in place, so results come out in the same order
on every run and every platform. Symbolic links to directories are not
followed.

Each file goes through the same pipeline:

    load_document -> SchemaResolver.resolve -> DocumentValidator.validate

and ends up as exactly one ValidationOutcome. Per-file errors never escape
the walker; they are recorded as ERROR or INVALID outcomes. With fail_fast
enabled the walk stops after the first such outcome.

All state of a run lives in the RunResult returned by run(), so several
runs (or tests) can use separate walkers side by side.
"""
import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterator, Optional, Union

from schema.resolver import SchemaResolver, Skip
from validation.document import is_candidate, load_document
from validation.errors import SchemaWalkError, ValidationFailure
from validation.validator import DocumentValidator

logger = logging.getLogger(__name__)


class OutcomeStatus(str, Enum):
    VALID = "valid"
    INVALID = "invalid"
    SKIPPED = "skipped"
    ERROR = "error"


FAILING_STATUSES = (OutcomeStatus.INVALID, OutcomeStatus.ERROR)


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of processing one file.

    Attributes:
        status: VALID, INVALID, SKIPPED or ERROR
        error: The ValidationFailure (INVALID), the SchemaWalkError (ERROR),
            or the skip reason text (SKIPPED); always None for VALID
    """

    status: OutcomeStatus
    error: Optional[Union[SchemaWalkError, str]] = None

    @classmethod
    def valid(cls) -> "ValidationOutcome":
        return cls(OutcomeStatus.VALID)

    @classmethod
    def skipped(cls, reason: str) -> "ValidationOutcome":
        return cls(OutcomeStatus.SKIPPED, reason)

    @classmethod
    def failed(cls, error: SchemaWalkError) -> "ValidationOutcome":
        if isinstance(error, ValidationFailure):
            return cls(OutcomeStatus.INVALID, error)
        return cls(OutcomeStatus.ERROR, error)

    @property
    def is_failure(self) -> bool:
        return self.status in FAILING_STATUSES


@dataclass
class RunResult:
    """Outcomes of one walk, in discovery order.

    Attributes:
        outcomes: Mapping of file path to outcome (insertion ordered)
        aborted: True when fail-fast stopped the walk early, so some files
            may not have been visited
    """

    outcomes: Dict[str, ValidationOutcome] = field(default_factory=dict)
    aborted: bool = False

    def record(self, path: str, outcome: ValidationOutcome) -> None:
        self.outcomes[path] = outcome

    @property
    def success(self) -> bool:
        return not any(outcome.is_failure for outcome in self.outcomes.values())

    def count(self, status: OutcomeStatus) -> int:
        return sum(1 for outcome in self.outcomes.values() if outcome.status == status)


def iter_documents(root: str) -> Iterator[str]:
    """Yield candidate document paths under root, depth-first in lexical order."""
    try:
        with os.scandir(root) as it:
            entries = sorted(it, key=lambda entry: entry.name)
    except OSError as e:
        logger.warning(f"Unable to read directory {root}: {e}")
        return

    for entry in entries:
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError:
            is_dir = False
        if is_dir:
            yield from iter_documents(entry.path)
        elif is_candidate(entry.name):
            yield entry.path


class Walker:
    """Validates every document in a directory tree.

    Attributes:
        resolver: SchemaResolver picking each document's schema
        validator: DocumentValidator checking documents
        fail_fast: Stop at the first INVALID or ERROR outcome
        on_outcome: Optional callback invoked as each file completes
    """

    def __init__(
        self,
        resolver: SchemaResolver,
        validator: Optional[DocumentValidator] = None,
        fail_fast: bool = False,
        on_outcome: Optional[Callable[[str, ValidationOutcome], None]] = None,
    ):
        self.resolver = resolver
        self.validator = validator if validator is not None else DocumentValidator()
        self.fail_fast = fail_fast
        self.on_outcome = on_outcome

    def validate_file(self, path: str) -> ValidationOutcome:
        """Load, resolve and validate a single file into an outcome."""
        try:
            document = load_document(path)
            resolution = self.resolver.resolve(document)
            if isinstance(resolution, Skip):
                return ValidationOutcome.skipped(resolution.reason)
            self.validator.validate(document, resolution.schema)
        except SchemaWalkError as e:
            if e.path is None:
                e.path = path
            return ValidationOutcome.failed(e)
        return ValidationOutcome.valid()

    def run(self, root: str) -> RunResult:
        """Walk root and validate every candidate document.

        Args:
            root: Directory to walk

        Returns:
            RunResult with one outcome per visited document
        """
        result = RunResult()
        for path in iter_documents(root):
            logger.info(f"Validating {path}")
            outcome = self.validate_file(path)
            result.record(path, outcome)
            if self.on_outcome is not None:
                self.on_outcome(path, outcome)

            if outcome.is_failure and self.fail_fast:
                logger.warning(f"Stopping at {path}: fail-fast is enabled")
                result.aborted = True
                break

        logger.info(
            f"Walk finished: {len(result.outcomes)} file(s), "
            f"{result.count(OutcomeStatus.INVALID)} invalid, {result.count(OutcomeStatus.ERROR)} error(s)"
        )
        return result
