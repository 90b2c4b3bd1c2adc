"""Controlled text inputs for currency and percentage values.

A masked field has two states. While ``IDLE`` it shows its numeric value in
canonical form (``$5,000,000.00`` or ``12.00%``). Focusing the field switches
it to ``EDITING``: the text the user types is kept verbatim and the numeric
value is updated whenever the text parses, so dependent results stay live
without the cursor jumping around. Leaving the field reformats it.
"""

from __future__ import annotations

from typing import Callable, Optional

from .formatter import format_currency, format_pct
from .utils import finite_or_zero, parse_currency, parse_percent

IDLE = "idle"
EDITING = "editing"


class MaskedField:
    """A text field bound to a float value.

    ``parse`` returns the number for a piece of text or ``None`` when the
    text should leave the value unchanged; ``render`` formats a value for
    the idle state.
    """

    def __init__(
        self,
        value: float,
        parse: Callable[[str], Optional[float]],
        render: Callable[[float], str],
        read_only: bool = False,
    ) -> None:
        self._parse = parse
        self._render = render
        self.read_only = read_only
        self.value = finite_or_zero(value)
        self.state = IDLE
        self.text = render(self.value)

    def focus(self) -> None:
        self.state = EDITING

    def type(self, text: str) -> Optional[float]:
        """Replace the field's text while editing.

        Returns the new numeric value, or ``None`` when the text did not
        change it (read-only field or unparsable text).
        """
        if self.read_only:
            return None
        self.state = EDITING
        self.text = text
        parsed = self._parse(text)
        if parsed is None:
            return None
        self.value = parsed
        return parsed

    def blur(self) -> None:
        self.state = IDLE
        self.text = self._render(self.value)


def _lenient_percent(text: str) -> Optional[float]:
    try:
        return parse_percent(text)
    except ValueError:
        return None


class CurrencyField(MaskedField):
    """Currency input; text that does not parse counts as zero."""

    def __init__(self, value: float, read_only: bool = False) -> None:
        super().__init__(value, parse_currency, format_currency, read_only)


class PercentField(MaskedField):
    """Percentage input (0-100 units); text that does not parse keeps the previous value."""

    def __init__(self, value: float, read_only: bool = False) -> None:
        super().__init__(value, _lenient_percent, format_pct, read_only)
