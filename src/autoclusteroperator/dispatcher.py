"""Routing of watch events to the reconciler by their ``autoClusterName``
label.
"""

from __future__ import annotations

__all__ = ("APPLIED_EVENT_TYPES", "dispatch_event", "extract_reconcile_key")

from collections.abc import Mapping
from typing import Any

import structlog

from autoclusteroperator.config import LABEL_KEY
from autoclusteroperator.exceptions import (
    CreateError,
    InvalidKeyError,
    QueryError,
)
from autoclusteroperator.reconciler import ReconcileOutcome, Reconciler

APPLIED_EVENT_TYPES = frozenset({None, "ADDED", "MODIFIED"})
"""Event types of objects that are present. `None` marks objects from the
initial listing, which kopf repeats after every watch restart.
"""


def extract_reconcile_key(body: Mapping[str, Any]) -> str | None:
    """Get the ``autoClusterName`` label value of an object, if any."""
    labels = (body.get("metadata") or {}).get("labels") or {}
    return labels.get(LABEL_KEY)


def dispatch_event(
    *,
    event_type: str | None,
    body: Mapping[str, Any],
    reconciler: Reconciler,
    logger: Any | None = None,
) -> ReconcileOutcome | None:
    """Reconcile the cluster named by a watched object's label.

    Deleted objects and objects without the label are skipped. Failures of
    the reconciliation are logged here and never raised, so one key cannot
    stop the handling of later events.

    Parameters
    ----------
    event_type : `str` or `None`
        The watch event type.
    body : `Mapping`
        The watched object.
    reconciler : `autoclusteroperator.reconciler.Reconciler`
        The reconciler to invoke.
    logger : optional
        Logger to use. Defaults to a structlog logger.

    Returns
    -------
    outcome : `autoclusteroperator.reconciler.ReconcileOutcome` or `None`
        The reconciliation outcome, or `None` if the event was skipped or the
        reconciliation failed.
    """
    if logger is None:
        logger = structlog.getLogger(__name__)

    if event_type not in APPLIED_EVENT_TYPES:
        logger.debug(f"Ignoring {event_type} event")
        return None

    key = extract_reconcile_key(body)
    if key is None:
        logger.debug(f"No {LABEL_KEY} label, nothing to reconcile")
        return None

    try:
        outcome = reconciler.reconcile(key, logger=logger)
    except InvalidKeyError as err:
        logger.warning(f"Skipping event: {err}")
        return None
    except (QueryError, CreateError):
        logger.exception(f"Reconciliation of {key} failed")
        return None

    logger.info(f"Reconciled {key}: {outcome.value}")
    return outcome
