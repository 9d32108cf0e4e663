"""Parser do input acumulado USSD.

O canal é stateless: cada requisição reenvia todo o histórico separado
por '*'. O parser é puro; o mesmo texto produz sempre os mesmos tokens.
"""

from __future__ import annotations

from dataclasses import dataclass

DELIMITER = "*"


@dataclass(frozen=True, slots=True)
class ParsedInput:
    """Tokens não vazios do input acumulado, em ordem."""

    tokens: tuple[str, ...] = ()

    @property
    def step(self) -> int:
        return len(self.tokens)

    @property
    def last_token(self) -> str | None:
        return self.tokens[-1] if self.tokens else None

    def since(self, index: int) -> tuple[str, ...]:
        """Tokens a partir do índice (0-based)."""
        return self.tokens[max(index, 0):]

    def extends(self, previous_text: str | None) -> bool:
        """Se este histórico estende (ou repete) o histórico anterior."""
        previous = parse_input(previous_text).tokens
        return self.tokens[: len(previous)] == previous


def parse_input(text: str | None) -> ParsedInput:
    """Divide o input em tokens, descartando vazios e espaços nas bordas.

    >>> parse_input("1**2*").tokens
    ('1', '2')
    """
    if not text:
        return ParsedInput()
    tokens = tuple(part.strip() for part in text.split(DELIMITER))
    return ParsedInput(tokens=tuple(token for token in tokens if token))
