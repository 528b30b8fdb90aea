# Calculator input fields: declarative rules plus typed access to raw form values
import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from .exceptions import InvalidFieldError

NUMBER = 'number'
TEXT = 'text'
CHOICE = 'choice'


@dataclass(frozen=True)
class FieldRule:
    """Declared input of a calculator, checked once before the calculator runs."""
    name: str
    label: str = ''
    kind: str = NUMBER
    required: bool = True
    default: Any = None
    choices: Tuple[str, ...] = ()
    positive: bool = False
    nonzero: bool = False
    integer: bool = False
    min_value: Optional[float] = None
    max_value: Optional[float] = None

    @property
    def display_name(self) -> str:
        return self.label or self.name


def number_field(name: str, label: str = '', **options) -> FieldRule:
    return FieldRule(name=name, label=label, kind=NUMBER, **options)


def text_field(name: str, label: str = '', **options) -> FieldRule:
    return FieldRule(name=name, label=label, kind=TEXT, **options)


def choice_field(name: str, choices: Sequence[str], label: str = '', **options) -> FieldRule:
    return FieldRule(name=name, label=label, kind=CHOICE, choices=tuple(choices), **options)


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def coerce_float(value: Any) -> Optional[float]:
    """Read a form value as a finite float; None when it is not a number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text or '_' in text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


_MISSING = object()


class FieldMap:
    """
    Raw field values of one request.

    Numeric fields may carry a companion ``<name>_unit`` multiplier that
    converts the entered value to the canonical SI unit.
    """

    def __init__(self, values: Optional[Mapping[str, Any]] = None, rules: Sequence[FieldRule] = ()):
        self._values: Dict[str, Any] = dict(values or {})
        self._rules: Dict[str, FieldRule] = {rule.name: rule for rule in rules}

    def _label(self, name: str) -> str:
        rule = self._rules.get(name)
        return rule.display_name if rule else name

    def raw(self, name: str) -> Any:
        return self._values.get(name)

    def has(self, name: str) -> bool:
        return not is_blank(self._values.get(name))

    def unit_multiplier(self, name: str) -> float:
        raw = self._values.get(f"{name}_unit")
        if is_blank(raw):
            return 1.0
        multiplier = coerce_float(raw)
        if multiplier is None or multiplier == 0:
            raise InvalidFieldError(f"Invalid unit selected for: {self._label(name)}", field=name)
        return multiplier

    def number(self, name: str, default: Any = _MISSING) -> float:
        """Numeric value in canonical units; defaults are already canonical."""
        raw = self._values.get(name)
        if is_blank(raw):
            if default is _MISSING:
                rule = self._rules.get(name)
                default = rule.default if rule else None
            if default is None:
                raise InvalidFieldError(f"Please provide a value for {self._label(name)}.", field=name)
            return float(default)
        value = coerce_float(raw)
        if value is None:
            raise InvalidFieldError(f"Invalid input detected for: {self._label(name)}", field=name)
        return value * self.unit_multiplier(name)

    def optional_number(self, name: str) -> Optional[float]:
        return self.number(name) if self.has(name) else None

    def integer(self, name: str, default: Any = _MISSING) -> int:
        value = self.number(name, default)
        if not float(value).is_integer():
            raise InvalidFieldError(f"{self._label(name)} must be a whole number.", field=name)
        return int(value)

    def text(self, name: str, default: str = '') -> str:
        raw = self._values.get(name)
        if is_blank(raw):
            rule = self._rules.get(name)
            if rule is not None and rule.default is not None:
                return str(rule.default)
            return default
        return str(raw).strip()

    def as_dict(self) -> Dict[str, Any]:
        return dict(self._values)
