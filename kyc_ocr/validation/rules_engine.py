"""Post-extraction validation gate for identity records.

Decides whether an extracted identity is complete enough to accept.
Kept separate from the field extractors so the acceptance policy can
change (for example, also requiring a date of birth) without touching
extraction logic.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from kyc_ocr.exceptions import ExtractionIncompleteError
from kyc_ocr.extraction.rule_extractor import ExtractedIdentity
from kyc_ocr.utils.config import ValidationConfig
from kyc_ocr.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_REQUIRED_FIELDS: tuple[str, ...] = ("id_number", "name")


@dataclass
class ValidationResult:
    """Result of a single field validation check."""

    field_name: str
    is_valid: bool
    message: str
    rule_name: str


@dataclass
class ValidationReport:
    """Aggregated validation report for an extracted identity."""

    all_valid: bool
    results: list[ValidationResult]
    missing_fields: list[str] = field(default_factory=list)


class IdentityValidator:
    """Acceptance gate applied after field extraction.

    Args:
        required_fields: Identity fields that must be present.
        id_length: Exact length the ID number must have.
    """

    def __init__(
        self,
        required_fields: Sequence[str] = DEFAULT_REQUIRED_FIELDS,
        id_length: int = 12,
    ) -> None:
        unknown = set(required_fields) - set(ExtractedIdentity.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown identity fields: {sorted(unknown)}")
        self.required_fields = list(required_fields)
        self.id_length = id_length
        self._validators: dict[str, Callable[[str, Any], ValidationResult]] = {
            "required": self._validate_required,
            "id_length": self._validate_id_length,
        }

    @classmethod
    def from_config(cls, config: ValidationConfig) -> "IdentityValidator":
        return cls(required_fields=config.required_fields, id_length=config.id_length)

    def validate(self, identity: ExtractedIdentity) -> ValidationReport:
        """Check an identity against the gate rules.

        Args:
            identity: Extracted identity fields.

        Returns:
            Validation report; ``missing_fields`` lists every field that
            failed a check, in check order.
        """
        checks: list[tuple[str, str]] = [
            (name, "required") for name in self.required_fields
        ]
        if "id_number" in self.required_fields:
            checks.append(("id_number", "id_length"))

        results: list[ValidationResult] = []
        missing: list[str] = []
        for field_name, rule_name in checks:
            value = getattr(identity, field_name)
            if rule_name == "id_length" and field_name in missing:
                continue
            result = self._validators[rule_name](field_name, value)
            results.append(result)
            if not result.is_valid and field_name not in missing:
                missing.append(field_name)

        all_valid = not missing
        logger.info(
            "Identity validation %s (%d checks)",
            "PASSED" if all_valid else "FAILED",
            len(results),
        )
        return ValidationReport(
            all_valid=all_valid, results=results, missing_fields=missing
        )

    def enforce(self, identity: ExtractedIdentity) -> ValidationReport:
        """Validate and raise if the identity is incomplete.

        Raises:
            ExtractionIncompleteError: If any check fails.
        """
        report = self.validate(identity)
        if not report.all_valid:
            raise ExtractionIncompleteError(report.missing_fields)
        return report

    def _validate_required(self, field_name: str, value: Any) -> ValidationResult:
        """Check if a required field is present and non-empty."""
        if value is not None and str(value).strip():
            return ValidationResult(
                field_name, True, "Required field present", "required"
            )
        return ValidationResult(
            field_name, False, f"Required field missing: {field_name}", "required"
        )

    def _validate_id_length(self, field_name: str, value: Any) -> ValidationResult:
        """Check the ID number has exactly ``id_length`` digits."""
        digits = str(value or "")
        if len(digits) == self.id_length and digits.isdigit():
            return ValidationResult(
                field_name, True, f"Valid {self.id_length}-digit number", "id_length"
            )
        return ValidationResult(
            field_name,
            False,
            f"Expected {self.id_length} digits, got {len(digits)}",
            "id_length",
        )
