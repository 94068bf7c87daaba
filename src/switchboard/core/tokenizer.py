"""Split one interactive input line into an argument vector."""

from __future__ import annotations

from dataclasses import dataclass, field

_QUOTE_NAMES = {'"': "double quote", "'": "single quote"}
ESCAPE = "\\"


@dataclass(frozen=True)
class TokenizeResult:
    """Tokens parsed from one line plus any recoverable warnings."""

    tokens: list[str]
    warnings: list[str] = field(default_factory=list)


def tokenize(line: str) -> TokenizeResult:
    """Split ``line`` on whitespace, honoring single and double quoted spans.

    Inside a quoted span only an escaped closing quote is special; every other
    character is copied as-is. Quoted spans join adjacent unquoted text, and an
    empty span yields an empty token. An unterminated quote runs to the end of
    the line and is reported as a warning rather than an error.
    """

    tokens: list[str] = []
    warnings: list[str] = []
    current: list[str] = []
    in_token = False
    quote: str | None = None
    index = 0
    length = len(line)

    while index < length:
        char = line[index]

        if quote is not None:
            if char == ESCAPE and index + 1 < length and line[index + 1] == quote:
                current.append(quote)
                index += 2
                continue
            if char == quote:
                quote = None
            else:
                current.append(char)
            index += 1
            continue

        if char in _QUOTE_NAMES:
            quote = char
            in_token = True
        elif char.isspace():
            if in_token:
                tokens.append("".join(current))
                current = []
                in_token = False
        else:
            current.append(char)
            in_token = True
        index += 1

    if quote is not None:
        warnings.append(f"Unclosed {_QUOTE_NAMES[quote]} in input; treating the rest of the line as one argument.")
    if in_token:
        tokens.append("".join(current))

    return TokenizeResult(tokens=tokens, warnings=warnings)
