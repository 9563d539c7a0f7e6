"""Due-card selection and review ordering."""
from datetime import datetime

from study_reviewer.models import CardReviewState


def is_due(card: CardReviewState, now: datetime) -> bool:
    return card.next_review_date <= now


def due_cards(cards, now: datetime) -> list[CardReviewState]:
    """Return the cards due at ``now``, keeping their input order."""
    return [card for card in cards if is_due(card, now)]


def prioritize(cards) -> list[CardReviewState]:
    """Order cards for review: earliest due first, harder cards first on ties.

    Two stable passes, so cards equal on both keys keep their input order.
    """
    ordered = sorted(cards, key=lambda c: c.difficulty, reverse=True)
    ordered.sort(key=lambda c: c.next_review_date)
    return ordered


def build_queue(cards, now: datetime, limit: int | None = None) -> list[CardReviewState]:
    queue = prioritize(due_cards(cards, now))
    if limit is not None:
        queue = queue[:limit]
    return queue
