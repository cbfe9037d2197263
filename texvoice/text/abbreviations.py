"""Abbreviation protection table.

Responsibilities:
- Define the immutable set of tokens whose periods never end a sentence.
- Rewrite matched periods to a caller-supplied protection sentinel.
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Iterable

DEFAULT_ABBREVIATION_TOKENS = (
    "e.g.",
    "i.e.",
    "etc.",
    "cf.",
    "vs.",
    "Fig.",
    "figs.",
    "eq.",
    "Eq.",
    "approx.",
    "Dr.",
    "Prof.",
    "No.",
    "vol.",
    "pp.",
    "Art.",
)


@dataclass(frozen=True, slots=True)
class AbbreviationSet:
    """Immutable abbreviation table used to suppress false sentence breaks.

    Attributes:
        tokens: Protected tokens, each ending with a period.
        case_sensitive: Whether tokens match only in their listed case.
    """

    tokens: frozenset[str]
    case_sensitive: bool = True

    @classmethod
    def from_tokens(cls, tokens: Iterable[str], case_sensitive: bool = True) -> AbbreviationSet:
        """Build a set from raw tokens, dropping blanks."""

        normalized = frozenset(token.strip() for token in tokens if token and token.strip())
        for token in normalized:
            if "." not in token or any(character.isspace() for character in token):
                raise ValueError(
                    f"Abbreviation `{token}` must be one word containing a period."
                )
        return cls(tokens=normalized, case_sensitive=case_sensitive)

    def with_extra(self, tokens: Iterable[str]) -> AbbreviationSet:
        """Return a new set extended with additional tokens."""

        return AbbreviationSet.from_tokens(
            [*self.tokens, *tokens],
            case_sensitive=self.case_sensitive,
        )

    def pattern(self) -> re.Pattern[str] | None:
        """Compile a whole-token matcher, longest tokens first."""

        if not self.tokens:
            return None
        alternatives = "|".join(
            re.escape(token) for token in sorted(self.tokens, key=lambda item: (-len(item), item))
        )
        flags = 0 if self.case_sensitive else re.IGNORECASE
        return re.compile(r"(?<![\w.])(?:" + alternatives + r")(?!\w)", flags)

    def protect(self, text: str, sentinel: str) -> str:
        """Replace periods inside matched tokens with `sentinel`."""

        compiled = self.pattern()
        if compiled is None:
            return text
        return compiled.sub(lambda match: match.group(0).replace(".", sentinel), text)


DEFAULT_ABBREVIATIONS = AbbreviationSet.from_tokens(DEFAULT_ABBREVIATION_TOKENS)
