from __future__ import annotations


class RuleSyntaxError(ValueError):
    """A line of the suffix list could not be compiled into a rule."""

    def __init__(self, line_number: int, line_text: str, reason: str) -> None:
        self.line_number = line_number
        self.line_text = line_text
        self.reason = reason
        super().__init__(f"line {line_number}: {reason} ({line_text!r})")


class NameSyntaxError(ValueError):
    """A candidate DNS name is malformed."""

    def __init__(self, reason: str, position: int = 0) -> None:
        self.reason = reason
        self.position = position
        super().__init__(f"{reason} at position {position}")
