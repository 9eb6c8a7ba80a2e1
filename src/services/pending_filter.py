"""Pending-validation filter: unvalidated predictions whose target time has passed."""

from datetime import datetime, timezone, tzinfo
from typing import Iterable, List

from ..models.prediction import Prediction
from ..utils.timestamps import ensure_aware


def filter_due_for_validation(
    predictions: Iterable[Prediction],
    now: datetime,
    default_tz: tzinfo = timezone.utc,
) -> List[Prediction]:
    """
    Return unvalidated predictions with `target_time <= now`, order preserved.

    A prediction whose `target_time` is missing or malformed is never reported
    as due.
    """
    now = ensure_aware(now)
    due = []
    for prediction in predictions:
        if prediction.validated:
            continue
        target_time = prediction.target_datetime(default_tz)
        if target_time is not None and target_time <= now:
            due.append(prediction)
    return due
