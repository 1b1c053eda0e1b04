"""Kopf handler for events of the watched machine inventories."""

__all__ = ("handle_watched_event",)

from typing import Any

import kopf

from autoclusteroperator.dispatcher import dispatch_event


def handle_watched_event(
    *,
    event: dict[str, Any],
    body: kopf.Body,
    memo: kopf.Memo,
    logger: Any,
    **kwargs: Any,
) -> None:
    """Handle any event of a watched object by reconciling the cluster named
    in its ``autoClusterName`` label.

    Parameters
    ----------
    event : `dict`
        The raw watch event. Its type is `None` for objects from the initial
        listing, else "ADDED", "MODIFIED" or "DELETED".
    body : `kopf.Body`
        The watched object.
    memo : `kopf.Memo`
        The operator memo, holding the ``reconciler`` set at start-up.
    logger : `Any`
        The kopf logger.
    kwargs : `Any`
        Additional keyword arguments provided by kopf.
    """
    dispatch_event(
        event_type=event["type"],
        body=body,
        reconciler=memo.reconciler,
        logger=logger,
    )
