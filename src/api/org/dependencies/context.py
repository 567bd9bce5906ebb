"""Request-scoped observation context."""

from typing import Annotated

from fastapi import Header

from infrastructure.observability import ObservationContext


def get_observation_context(
    x_request_id: Annotated[str | None, Header()] = None,
) -> ObservationContext:
    """Build the observation context bound to every probe of a request.

    Args:
        x_request_id: Correlation id forwarded by the caller, if any

    Returns:
        ObservationContext carrying the request id
    """
    return ObservationContext(request_id=x_request_id)
