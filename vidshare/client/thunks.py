from typing import TYPE_CHECKING, Any, Awaitable, Callable

from .actions import Fulfilled, Pending, Rejected
from .gateway import Err, ErrorKind, Ok, Result

if TYPE_CHECKING:
    from .store import Store


async def run_thunk(
    store: "Store",
    slice_name: str,
    op: str,
    call: Callable[[], Awaitable[Result]],
    *,
    fallback: str,
    payload: Callable[[Ok], Any] = lambda result: result.data,
) -> Result:
    """
    Dispatch ``Pending``, await ``call`` and dispatch the outcome.

    The rejection message is the server's text when there is one, else
    ``fallback``. The gateway result is returned unchanged for callers that
    need more than the slice keeps.
    """
    store.dispatch(Pending(slice_name, op))
    result = await call()
    if isinstance(result, Err):
        store.dispatch(Rejected(slice_name, op, result.message or fallback))
        return result
    store.dispatch(Fulfilled(slice_name, op, payload(result)))
    return result


def reject_locally(store: "Store", slice_name: str, op: str, message: str) -> Err:
    """Fail an operation before any request is sent."""
    store.dispatch(Pending(slice_name, op))
    store.dispatch(Rejected(slice_name, op, message))
    return Err(ErrorKind.VALIDATION, message, None)
