"""
Deck - Builds, shuffles and deals the 108-card draw pile.

Per color: one 0, two each of 1-9, two skip, two reverse, two draw two.
Plus four wild and four wild draw four.
"""

from __future__ import annotations
import random

from .state import Card, CardColor, CardKind, Session, PLAYABLE_COLORS

ACTION_KINDS = (CardKind.SKIP, CardKind.REVERSE, CardKind.DRAW_TWO)
WILD_KINDS = (CardKind.WILD, CardKind.WILD_DRAW_FOUR)


def build_deck() -> list[Card]:
    """Return an unshuffled standard deck."""
    cards: list[Card] = []
    for color in sorted(PLAYABLE_COLORS):
        cards.append(Card(
            card_id=f"{color}-0-1", color=color,
            kind=CardKind.NUMBER.value, face_value=0,
        ))
        for value in range(1, 10):
            for copy in (1, 2):
                cards.append(Card(
                    card_id=f"{color}-{value}-{copy}", color=color,
                    kind=CardKind.NUMBER.value, face_value=value,
                ))
        for kind in ACTION_KINDS:
            for copy in (1, 2):
                cards.append(Card(
                    card_id=f"{color}-{kind.value}-{copy}", color=color, kind=kind.value,
                ))
    for kind in WILD_KINDS:
        for copy in range(1, 5):
            cards.append(Card(
                card_id=f"wild-{kind.value}-{copy}",
                color=CardColor.WILD.value,
                kind=kind.value,
            ))
    return cards


def shuffled_deck(seed: int | None = None) -> list[Card]:
    """Build a deck and shuffle it. A seed makes the order reproducible."""
    cards = build_deck()
    random.Random(seed).shuffle(cards)
    return cards


def draw_cards(session: Session, count: int) -> list[Card]:
    """
    Take up to count cards off the top of the session deck.

    Returns fewer cards when the deck runs out.
    """
    drawn = session.deck[:count]
    session.deck = session.deck[count:]
    return drawn


def deal(session: Session, hand_size: int) -> Session:
    """Deal hand_size cards to every seat, one at a time in seat order."""
    for _ in range(hand_size):
        for player in session.players:
            player.hand.extend(draw_cards(session, 1))
    return session


def draw_initial_card(session: Session) -> Card | None:
    """Pull the first number card out of the deck to open the discard pile."""
    for i, card in enumerate(session.deck):
        if card.kind == CardKind.NUMBER.value:
            return session.deck.pop(i)
    return None
