"""Item execution: maps, dispatches and normalises each input item in order."""

import logging
from typing import Any, List, Mapping, Optional, Sequence

from app.models.execute import ItemError, OutputItem, PairedItem
from app.services.dispatcher import AuthenticatedHttpClient, dispatch
from app.services.errors import NodeApiError, NodeError
from app.services.parameters import map_item

logger = logging.getLogger(__name__)


async def execute_items(
    items: Sequence[Mapping[str, Any]],
    client: AuthenticatedHttpClient,
    *,
    continue_on_fail: bool = False,
    base_url: Optional[str] = None,
) -> List[OutputItem]:
    """Process *items* one at a time, preserving input order.

    Each item is attempted exactly once.  With *continue_on_fail* a failing
    item yields ``{"error": message}`` and processing moves on; otherwise the
    first failure aborts the batch.

    Raises:
        NodeOperationError: invalid item parameters (before any request).
        NodeApiError: API/transport failure, or any other unexpected error
            wrapped with the item index.
    """
    results: List[OutputItem] = []

    for index, raw in enumerate(items):
        try:
            spec = map_item(raw, index)
            result = await dispatch(client, spec, base_url)
            results.append(OutputItem(data=result, paired_item=PairedItem(item=index)))
        except Exception as exc:
            message = _error_message(exc)
            if continue_on_fail:
                logger.warning("Item %d failed, continuing: %s", index, message)
                results.append(
                    OutputItem(data=ItemError(error=message), paired_item=PairedItem(item=index))
                )
                continue

            if isinstance(exc, NodeError):
                if exc.item_index is None:
                    exc.item_index = index
                raise

            raise NodeApiError(message, item_index=index) from exc

    return results


def _error_message(exc: BaseException) -> str:
    if isinstance(exc, NodeError):
        return exc.message
    return str(exc) or type(exc).__name__
