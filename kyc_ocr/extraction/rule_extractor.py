"""Rule-based identity field extraction from Aadhaar OCR text.

Recovers the ID number, name, date of birth and gender from noisy OCR
output using an ordered set of regex and line heuristics. Each rule is a
pure function of the prepared text; within a rule the first match wins.
Extraction never raises: a field that cannot be found is ``None``.
"""

import re
from collections.abc import Callable
from dataclasses import asdict, dataclass

from kyc_ocr.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ExtractedIdentity:
    """Identity fields recovered from a single document."""

    id_number: str | None = None
    name: str | None = None
    date_of_birth: str | None = None
    gender: str | None = None

    def masked_id_number(self) -> str | None:
        """Return the ID number with its middle four digits hidden."""
        if self.id_number is None:
            return None
        return _MASK_PATTERN.sub(r"\1****\2", self.id_number)

    def to_dict(self) -> dict[str, str | None]:
        return asdict(self)


@dataclass(frozen=True)
class PreparedText:
    """OCR text split into the views the rules operate on."""

    original: str
    lines: list[str]
    flattened: str


# \d is ASCII-only so OCR noise in other scripts never forms an ID number.
_ID_PATTERN = re.compile(r"\b\d{4}\s?\d{4}\s?\d{4}\b", re.ASCII)
_ID_LINE_PATTERN = re.compile(r"^\d{4}\s?\d{4}\s?\d{4}$", re.ASCII)
_DIGIT_PATTERN = re.compile(r"\d", re.ASCII)
_DOB_PATTERN = re.compile(r"\d{2}[/\-]\d{2}[/\-]\d{4}", re.ASCII)
_GENDER_PATTERN = re.compile(r"Male|Female|MALE|FEMALE|M|F")
_MASK_PATTERN = re.compile(r"(\d{4})\d{4}(\d{4})")

NAME_STOPWORDS: tuple[str, ...] = ("male", "female", "dob", "birth", "government")


def prepare_text(text: str) -> PreparedText:
    """Split raw OCR text into trimmed lines and a single flattened line.

    Args:
        text: Raw OCR output.

    Returns:
        Prepared views of the text.
    """
    lines = [line.strip() for line in text.split("\n")]
    flattened = re.sub(r"\s+", " ", text.replace("\n", " "))
    return PreparedText(
        original=text,
        lines=[line for line in lines if line],
        flattened=flattened,
    )


def extract_id_number(prepared: PreparedText) -> str | None:
    """Find the first 12-digit number, optionally grouped as 4-4-4.

    The match must sit on word boundaries, so 12 digits inside a longer
    digit run are ignored.
    """
    match = _ID_PATTERN.search(prepared.flattened)
    if match is None:
        return None
    return re.sub(r"\s", "", match.group(0))


def _is_name_candidate(line: str) -> bool:
    if _ID_LINE_PATTERN.match(line):
        return False
    if _DIGIT_PATTERN.search(line):
        return False
    lower = line.lower()
    return not any(word in lower for word in NAME_STOPWORDS)


def extract_name(prepared: PreparedText) -> str | None:
    """Return the first line with no digits and no header/label keywords."""
    for line in prepared.lines:
        if _is_name_candidate(line):
            return line
    return None


def extract_date_of_birth(prepared: PreparedText) -> str | None:
    """Return the first ``DD/MM/YYYY`` or ``DD-MM-YYYY`` substring verbatim."""
    match = _DOB_PATTERN.search(prepared.flattened)
    return match.group(0) if match else None


def extract_gender(prepared: PreparedText) -> str | None:
    """Classify the first gender token in the original text.

    Any token whose lowercase form contains ``f`` maps to ``"Female"``,
    everything else the pattern matches maps to ``"Male"``. Tokens are not
    word-bounded, so a capital ``M`` or ``F`` inside a word also counts.
    """
    match = _GENDER_PATTERN.search(prepared.original)
    if match is None:
        return None
    return "Female" if "f" in match.group(0).lower() else "Male"


FieldRule = Callable[[PreparedText], str | None]

FIELD_RULES: dict[str, FieldRule] = {
    "id_number": extract_id_number,
    "name": extract_name,
    "date_of_birth": extract_date_of_birth,
    "gender": extract_gender,
}


class RuleExtractor:
    """Regex-based extractor for Aadhaar identity fields.

    Args:
        rules: Mapping of field name to extraction rule. Defaults to
            :data:`FIELD_RULES`.
    """

    def __init__(self, rules: dict[str, FieldRule] | None = None) -> None:
        self.rules = dict(rules or FIELD_RULES)

    def extract(self, text: str) -> ExtractedIdentity:
        """Extract identity fields from raw OCR text.

        Args:
            text: Raw OCR text.

        Returns:
            Extracted identity; unmatched fields are ``None``.
        """
        prepared = prepare_text(text or "")
        values = {name: rule(prepared) for name, rule in self.rules.items()}
        identity = ExtractedIdentity(**values)

        found = [name for name, value in values.items() if value is not None]
        logger.info(
            "Rule extraction found %d/%d fields: %s",
            len(found),
            len(values),
            ", ".join(found) or "none",
        )
        return identity
