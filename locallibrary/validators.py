"""Declarative validation and sanitization of submitted form data.

Each field owns an ordered chain of rules. A rule either checks the current
value (and carries the message reported when the check fails) or transforms
it. Chains run left to right, so a transform changes what later rules see.
Once a check fails for a field its later checks are skipped, but transforms
still run so the echoed value is always trimmed and escaped. All fields are
evaluated; errors come back in rule-table order.
"""
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from markupsafe import escape as _html_escape

from .database import DocumentId, is_valid_id
from .dates import parse_date

_ALNUM_RE = re.compile(r"[0-9A-Za-z]+")


@dataclass(frozen=True)
class Rule:
    check: Optional[Callable[[Any], bool]] = None
    transform: Optional[Callable[[Any], Any]] = None
    message: str = "Invalid value"


@dataclass(frozen=True)
class FieldRules:
    name: str
    rules: Sequence[Rule]
    # Empty values skip the chain and normalize to None.
    optional: bool = False
    # The value is a list; every item goes through the chain.
    many: bool = False


@dataclass
class FieldError:
    field: str
    message: str
    value: Any = None


@dataclass
class ValidationResult:
    values: Dict[str, Any] = field(default_factory=dict)
    errors: List[FieldError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def messages(self, name: str) -> List[str]:
        return [e.message for e in self.errors if e.field == name]


# ------------------------- Rule constructors ------------------------- #
def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


def trim() -> Rule:
    return Rule(transform=lambda v: v.strip() if isinstance(v, str) else v)


def escape() -> Rule:
    return Rule(transform=lambda v: str(_html_escape(v)) if isinstance(v, str) else v)


def min_length(n: int, message: str) -> Rule:
    return Rule(check=lambda v: len(_as_text(v)) >= n, message=message)


def max_length(n: int, message: str) -> Rule:
    return Rule(check=lambda v: len(_as_text(v)) <= n, message=message)


def required(message: str) -> Rule:
    return min_length(1, message)


def alphanumeric(message: str) -> Rule:
    return Rule(check=lambda v: bool(_ALNUM_RE.fullmatch(_as_text(v))), message=message)


def iso_date(message: str) -> Rule:
    return Rule(check=lambda v: parse_date(v) is not None, message=message)


def to_date() -> Rule:
    # Unparseable input becomes None.
    return Rule(transform=parse_date)


def document_id(message: str) -> Rule:
    # Valid ids are stored in their canonical lower-case form.
    return Rule(
        check=is_valid_id,
        transform=lambda v: DocumentId.parse(v) if is_valid_id(v) else v,
        message=message,
    )


# ------------------------- Evaluation ------------------------- #
def _run_chain(value: Any, rules: Sequence[Rule]):
    message = None
    for rule in rules:
        if rule.check is not None and message is None and not rule.check(value):
            message = rule.message
        if rule.transform is not None:
            value = rule.transform(value)
    return value, message


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def validate(data: Mapping[str, Any], table: Sequence[FieldRules]) -> ValidationResult:
    result = ValidationResult()
    for field_rules in table:
        raw = data.get(field_rules.name)

        if field_rules.many:
            items, first_error = [], None
            for item in _as_list(raw):
                value, message = _run_chain(item, field_rules.rules)
                items.append(value)
                first_error = first_error or message
            result.values[field_rules.name] = items
            if first_error:
                result.errors.append(FieldError(field_rules.name, first_error, items))
            continue

        if field_rules.optional and (raw is None or _as_text(raw).strip() == ""):
            result.values[field_rules.name] = None
            continue

        value, message = _run_chain("" if raw is None else raw, field_rules.rules)
        result.values[field_rules.name] = value
        if message:
            result.errors.append(FieldError(field_rules.name, message, value))
    return result


# ------------------------- Rule tables ------------------------- #
AUTHOR_RULES = (
    FieldRules("first_name", (
        trim(),
        required("First name must be specified."),
        escape(),
        alphanumeric("First name has non-alphanumeric characters."),
    )),
    FieldRules("family_name", (
        trim(),
        required("Family name must be specified."),
        escape(),
        alphanumeric("Family name has non-alphanumeric characters."),
    )),
    FieldRules("date_of_birth", (iso_date("Invalid date of birth"), to_date()), optional=True),
    FieldRules("date_of_death", (iso_date("Invalid date of death"), to_date()), optional=True),
)

BOOK_RULES = (
    FieldRules("title", (trim(), required("Title must not be empty."), escape())),
    FieldRules("author", (
        trim(),
        required("Author must not be empty."),
        escape(),
        document_id("Author must be a valid author."),
    )),
    FieldRules("summary", (trim(), required("Summary must not be empty."), escape())),
    FieldRules("isbn", (trim(), required("ISBN must not be empty."), escape())),
    FieldRules("genre", (escape(), document_id("Genre must be a valid genre.")), many=True),
)

GENRE_RULES = (
    FieldRules("name", (
        trim(),
        min_length(3, "Genre name must contain at least 3 characters"),
        max_length(100, "Genre name must not exceed 100 characters"),
        escape(),
    )),
)

BOOKINSTANCE_RULES = (
    FieldRules("book", (
        trim(),
        required("Book must be specified"),
        escape(),
        document_id("Book must be a valid book"),
    )),
    FieldRules("imprint", (trim(), required("Imprint must be specified"), escape())),
    FieldRules("status", (trim(), escape())),
    FieldRules("due_back", (iso_date("Invalid date"), to_date()), optional=True),
)
