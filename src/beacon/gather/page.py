# src/beacon/gather/page.py
"""Evaluate snapshot expressions in the inspected page."""

from typing import Any

from beacon.contracts.errors import PageEvaluationError
from beacon.contracts.session import ProtocolSession


async def evaluate_in_page(session: ProtocolSession, name: str, expression: str) -> Any:
    """Evaluate ``expression`` in the page and return its JSON value.

    Args:
        session: Transport for the inspected session
        name: Human-readable name used in errors
        expression: JavaScript expression; may evaluate to a promise

    Raises:
        PageEvaluationError: If the page reports an exception
    """
    reply = await session.send_command(
        "Runtime.evaluate",
        {
            "expression": expression,
            "returnByValue": True,
            "awaitPromise": True,
        },
    )
    if "exceptionDetails" in reply:
        raise PageEvaluationError(name, reply["exceptionDetails"])
    return reply.get("result", {}).get("value")
