"""
Effect Resolver - What each card kind does when it is played.

One effect per card kind. Each effect answers two questions:
- can_execute(context): is the play legal as given (e.g. a color was named)?
- execute(context): apply the effect to the session in place.

The generic part of a play (moving the card from hand to discard pile)
is not an effect; the play coordinator does it for every card.

resolve_effect() maps any card kind to an effect. Kinds it does not know
get the number-card effect, which does nothing.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .state import CardKind, PLAYABLE_COLORS, plain
from .deck import draw_cards
from . import turn

if TYPE_CHECKING:
    from .state import Session, Card


@dataclass
class EffectContext:
    """Everything an effect needs to run."""
    session: Session
    card: Card
    chosen_color: str | None = None

    # Human-readable log of what the effect did
    changes: list[str] = field(default_factory=list)


class CardEffect:
    """Base effect. Always playable, does nothing."""

    kind: str = CardKind.NUMBER.value

    def can_execute(self, context: EffectContext) -> bool:
        return True

    def execute(self, context: EffectContext) -> None:
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class NumberEffect(CardEffect):
    """Plain number card: no effect beyond being discarded."""


class SkipEffect(CardEffect):
    kind = CardKind.SKIP.value

    def execute(self, context: EffectContext) -> None:
        skipped = turn.peek_next(context.session)
        turn.advance(context.session)
        if skipped:
            context.changes.append(f"{skipped.player_id} is skipped")


class ReverseEffect(CardEffect):
    kind = CardKind.REVERSE.value

    def execute(self, context: EffectContext) -> None:
        turn.reverse(context.session)
        context.changes.append("Direction of play reversed")


class ColorChoiceEffect(CardEffect):
    """Shared rule for wilds: the player must name a playable color."""

    def can_execute(self, context: EffectContext) -> bool:
        return plain(context.chosen_color) in PLAYABLE_COLORS

    def _set_color(self, context: EffectContext) -> None:
        if not self.can_execute(context):
            raise ValueError(f"Invalid color chosen for {self.kind} card: {context.chosen_color!r}")
        context.session.current_color = plain(context.chosen_color)
        context.changes.append(f"Color is now {context.session.current_color}")


class PenaltyDrawMixin:
    """Next player draws cards and loses their turn."""

    draw_count: int = 0

    def _penalize_next(self, context: EffectContext) -> None:
        session = context.session
        victim = turn.peek_next(session)
        if victim is None:
            return
        drawn = draw_cards(session, self.draw_count)
        victim.hand.extend(drawn)
        turn.advance(session)
        context.changes.append(
            f"{victim.player_id} draws {len(drawn)} card(s) and is skipped"
        )


class DrawTwoEffect(PenaltyDrawMixin, CardEffect):
    kind = CardKind.DRAW_TWO.value
    draw_count = 2

    def execute(self, context: EffectContext) -> None:
        self._penalize_next(context)


class WildEffect(ColorChoiceEffect):
    kind = CardKind.WILD.value

    def execute(self, context: EffectContext) -> None:
        self._set_color(context)


class WildDrawFourEffect(PenaltyDrawMixin, ColorChoiceEffect):
    kind = CardKind.WILD_DRAW_FOUR.value
    draw_count = 4

    def execute(self, context: EffectContext) -> None:
        self._set_color(context)
        self._penalize_next(context)


NUMBER_EFFECT = NumberEffect()

EFFECTS: dict[str, CardEffect] = {
    CardKind.NUMBER.value: NUMBER_EFFECT,
    CardKind.SKIP.value: SkipEffect(),
    CardKind.REVERSE.value: ReverseEffect(),
    CardKind.DRAW_TWO.value: DrawTwoEffect(),
    CardKind.WILD.value: WildEffect(),
    CardKind.WILD_DRAW_FOUR.value: WildDrawFourEffect(),
}


def resolve_effect(card: Card) -> CardEffect:
    """Effect for card's kind; unknown kinds behave like number cards."""
    return EFFECTS.get(plain(card.kind), NUMBER_EFFECT)
