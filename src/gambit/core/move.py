"""Move value object (UCI-style representation)."""

from __future__ import annotations

from dataclasses import dataclass

from gambit.core.enums import PieceType
from gambit.core.types import MAX_BOARD_SIZE, Square, parse_square, square_name

_PROMO_CHARS: dict[PieceType, str] = {
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
}
_PROMO_TYPES: dict[str, PieceType] = {v: k for k, v in _PROMO_CHARS.items()}


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable value object representing a single chess move.

    A move is only a pair of squares and an optional promotion piece; whether
    it castles, captures en passant or double-steps follows from the position
    it is played in.
    """

    from_sq: Square
    to_sq: Square
    promotion: PieceType | None = None

    def __str__(self) -> str:
        base = f"{square_name(self.from_sq)}{square_name(self.to_sq)}"
        if self.promotion is not None:
            base += _PROMO_CHARS.get(self.promotion, "")
        return base

    @property
    def uci(self) -> str:
        """UCI long-algebraic notation."""
        return str(self)

    @classmethod
    def from_uci(cls, text: str, size: int = MAX_BOARD_SIZE) -> Move:
        """Parse ``e2e4`` / ``e7e8q``.  Raises ``ValueError`` on bad input."""
        body = text.strip()
        promotion: PieceType | None = None
        if body and body[-1] in _PROMO_TYPES:
            promotion = _PROMO_TYPES[body[-1]]
            body = body[:-1]

        # The destination starts at the second file letter.
        split = next(
            (i for i in range(1, len(body)) if body[i].isalpha()),
            None,
        )
        if split is None:
            raise ValueError(f"Invalid move text: {text!r}")
        return cls(
            parse_square(body[:split], size),
            parse_square(body[split:], size),
            promotion,
        )
