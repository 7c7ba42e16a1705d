"""
Answer value model for feedback answers.

Answer values are stored schema-less: a number, a string, a list of option
tokens, or a map such as ``{"other": "free text"}``. ``AnswerValue`` inspects
the raw value once and exposes typed accessors so analyzers never have to
branch on the runtime shape themselves. Accessors return ``None`` for values
that do not fit and never raise.
"""
import math
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Union

from app.utils.aggregation import as_utc

Number = Union[int, float]


class ValueKind(Enum):
    NUMBER = "number"
    TEXT = "text"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    EMPTY = "empty"
    OTHER = "other"


def _classify(raw: Any) -> ValueKind:
    if raw is None:
        return ValueKind.EMPTY
    # bool is an int subclass, keep it out of numeric aggregates
    if isinstance(raw, bool):
        return ValueKind.OTHER
    if isinstance(raw, (int, float)):
        return ValueKind.NUMBER
    if isinstance(raw, str):
        return ValueKind.TEXT
    if isinstance(raw, (list, tuple)):
        return ValueKind.SEQUENCE
    if isinstance(raw, dict):
        return ValueKind.MAPPING
    return ValueKind.OTHER


def normalize_number(value: Number) -> Number:
    """Collapse integral floats to int so 4 and 4.0 share a bucket"""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def option_token(value: Any) -> str:
    """String form of a choice token, matching how it is shown in exports"""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        return str(normalize_number(value))
    return str(value)


class AnswerValue:
    """A raw answer value classified once by shape"""

    __slots__ = ('raw', 'kind')

    def __init__(self, raw: Any):
        self.raw = raw
        self.kind = _classify(raw)

    def __repr__(self):
        return f'<AnswerValue {self.kind.value}: {self.raw!r}>'

    def __eq__(self, other):
        if not isinstance(other, AnswerValue):
            return NotImplemented
        return self.raw == other.raw

    def __hash__(self):
        return hash((self.kind, repr(self.raw)))

    def as_number(self) -> Optional[Number]:
        """Numeric reading of the value; numeric-looking strings are accepted"""
        if self.kind == ValueKind.NUMBER:
            if isinstance(self.raw, float) and (math.isnan(self.raw) or math.isinf(self.raw)):
                return None
            return normalize_number(self.raw)
        if self.kind == ValueKind.TEXT:
            text = self.raw.strip()
            if not text:
                return None
            try:
                number = float(text)
            except ValueError:
                return None
            if math.isnan(number) or math.isinf(number):
                return None
            return normalize_number(number)
        return None

    def as_text(self) -> Optional[str]:
        """The string value when it has non-blank content"""
        if self.kind == ValueKind.TEXT and self.raw.strip():
            return self.raw
        return None

    def as_options(self) -> Optional[List[str]]:
        """Selected tokens of a multi-select answer"""
        if self.kind != ValueKind.SEQUENCE:
            return None
        return [option_token(item) for item in self.raw if item is not None]

    def as_option(self) -> Optional[str]:
        """Token of a single-select answer"""
        if self.kind in (ValueKind.NUMBER, ValueKind.TEXT) and self.raw:
            return option_token(self.raw)
        return None

    def other_text(self, allow_other: bool) -> Optional[str]:
        """Free text entered for an "other" choice, when the question permits it"""
        if not allow_other or self.kind != ValueKind.MAPPING:
            return None
        other = self.raw.get('other')
        if isinstance(other, str) and other:
            return other
        return None


class DatedAnswer:
    """An answer value paired with the submission time of its response"""

    __slots__ = ('value', 'submitted_at', 'response_id', 'question_id')

    def __init__(self, value: AnswerValue, submitted_at: Optional[datetime],
                 response_id=None, question_id=None):
        self.value = value
        self.submitted_at = submitted_at
        self.response_id = response_id
        self.question_id = question_id

    def __repr__(self):
        return f'<DatedAnswer {self.value!r} at {self.submitted_at}>'


def annotate_answers(answers: Iterable[Any],
                     submitted_at_by_response: Dict[Any, datetime]) -> List[DatedAnswer]:
    """
    Wrap answer rows as DatedAnswer objects ordered by submission time.

    :param answers: objects exposing ``value``, ``response_id`` and ``created_at``
    :param submitted_at_by_response: response id -> submitted_at lookup
    :return: list of DatedAnswer sorted ascending by submission time (stable)
    """
    dated = []
    for answer in answers:
        submitted_at = submitted_at_by_response.get(answer.response_id)
        if submitted_at is None:
            submitted_at = getattr(answer, 'created_at', None)
        submitted_at = as_utc(submitted_at)
        dated.append(DatedAnswer(AnswerValue(answer.value), submitted_at,
                                 answer.response_id, getattr(answer, 'question_id', None)))

    dated.sort(key=lambda a: (a.submitted_at is None, a.submitted_at or datetime.min))
    return dated
