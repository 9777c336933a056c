"""Confirmation gate for irreversible cluster-wide actions."""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from pachctl.ports.confirm import Confirmer

LOGGER = logging.getLogger(__name__)

DELETE_ALL_PROMPT = "Are you sure you want to delete all repos, commits, files, pipelines and jobs? yN"

T = TypeVar("T")


def confirm_and_run(confirmer: Confirmer, prompt: str, action: Callable[[], T]) -> bool:
    """Run ``action`` once if the operator confirms; return whether it ran.

    ``ConfirmationError`` from the confirmer propagates and the action is not
    invoked. A declined prompt is not an error.
    """

    if not confirmer.confirm(prompt):
        LOGGER.info("operator declined: %s", prompt)
        return False
    action()
    return True


__all__ = ["DELETE_ALL_PROMPT", "confirm_and_run"]
