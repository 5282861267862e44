"""
Slice machinery shared by the jobs, candidates and assessments state.

A slice is a pure reducer `reduce(state, action) -> state` plus a
`SliceStore` that holds the current state. Async operations are described by
an `AsyncThunk`, which names the pending/fulfilled/rejected actions;
`SliceStore.run_thunk` dispatches them around one API call.

State only changes after the API call has answered. Failures are recorded
as a message on the slice and never retried.
"""

import itertools
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict

from core.exceptions import TalentFlowError

logger = logging.getLogger(__name__)

S = TypeVar("S", bound="SliceState")

Reducer = Callable[[S, "Action"], S]
Listener = Callable[[Any], None]


class Status(str, Enum):
    """Request lifecycle of a slice."""

    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"


@dataclass(frozen=True)
class Action:
    """Something that happened; reducers turn it into a new state."""

    type: str
    payload: Any = None
    meta: Dict[str, Any] = field(default_factory=dict)


class SliceState(BaseModel):
    """Fields every slice carries."""

    model_config = ConfigDict(frozen=True)

    status: Status = Status.IDLE
    error: Optional[str] = None

    @property
    def loading(self) -> bool:
        return self.status == Status.LOADING


class AsyncThunk:
    """Action names and default error message for one async operation."""

    def __init__(self, type_prefix: str, default_error: str, fenced: bool = False):
        """
        Args:
            type_prefix: e.g. `jobs/fetchJobs`
            default_error: Message used when the failure carries none
            fenced: Only the latest request's outcome is applied
        """
        self.type_prefix = type_prefix
        self.default_error = default_error
        self.fenced = fenced
        self.pending = f"{type_prefix}/pending"
        self.fulfilled = f"{type_prefix}/fulfilled"
        self.rejected = f"{type_prefix}/rejected"

    def __repr__(self) -> str:
        return f"<AsyncThunk {self.type_prefix}>"


def pending_state(state: S, action: Action) -> S:
    return state.model_copy(update={"status": Status.LOADING, "error": None})


def rejected_state(state: S, action: Action) -> S:
    """Keep the data, remember the message."""
    return state.model_copy(update={"status": Status.ERROR, "error": action.payload})


def clear_error_state(state: S, action: Action) -> S:
    status = Status.IDLE if state.status == Status.ERROR else state.status
    return state.model_copy(update={"status": status, "error": None})


def settle(state: S, **changes: Any) -> S:
    """Successful completion: back to idle with the given data changes."""
    return state.model_copy(update={"status": Status.IDLE, **changes})


def thunk_handlers(
    thunk: AsyncThunk,
    on_fulfilled: Callable[[S, Action], S],
) -> Dict[str, Callable[[S, Action], S]]:
    """
    Reducer cases for the three actions of `thunk`.

    For fenced thunks the pending case records the request id in
    `latest_request_id`, and outcomes of any other request are ignored.
    """
    if not thunk.fenced:
        return {
            thunk.pending: pending_state,
            thunk.fulfilled: on_fulfilled,
            thunk.rejected: rejected_state,
        }

    def fenced_pending(state: S, action: Action) -> S:
        return pending_state(state, action).model_copy(
            update={"latest_request_id": action.meta.get("request_id")}
        )

    def fence(handler: Callable[[S, Action], S]) -> Callable[[S, Action], S]:
        def apply(state: S, action: Action) -> S:
            if action.meta.get("request_id") != state.latest_request_id:
                logger.debug(f"Discarding stale {action.type} (request {action.meta.get('request_id')})")
                return state
            return handler(state, action)

        return apply

    return {
        thunk.pending: fenced_pending,
        thunk.fulfilled: fence(on_fulfilled),
        thunk.rejected: fence(rejected_state),
    }


def create_reducer(
    initial_state: S, handlers: Dict[str, Callable[[S, Action], S]]
) -> Reducer:
    """Build a reducer that dispatches on `action.type`; unknown actions are no-ops."""

    def reduce(state: Optional[S], action: Action) -> S:
        if state is None:
            state = initial_state
        handler = handlers.get(action.type)
        return handler(state, action) if handler else state

    return reduce


class SliceStore(Generic[S]):
    """Holds one slice's state and applies actions to it."""

    def __init__(self, name: str, reducer: Reducer, initial_state: S):
        self.name = name
        self.reducer = reducer
        self.state: S = initial_state
        self._listeners: List[Listener] = []
        self._request_ids = itertools.count(1)

    def dispatch(self, action: Action) -> Action:
        self.state = self.reducer(self.state, action)
        for listener in list(self._listeners):
            listener(self.state)
        return action

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call `listener(state)` after every dispatch. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def consume_error(self) -> Optional[str]:
        """Return the pending error once, then clear it."""
        error = self.state.error
        if error is not None:
            self.dispatch(Action(f"{self.name}/clearError"))
        return error

    async def run_thunk(
        self,
        thunk: AsyncThunk,
        call: Callable[[], Awaitable[Any]],
        arg: Any = None,
        to_payload: Optional[Callable[[Any], Any]] = None,
    ) -> Action:
        """
        Dispatch pending, await `call()`, then dispatch fulfilled or rejected.

        Returns:
            The settling action; check `action.type` against `thunk.fulfilled`
        """
        meta = {"request_id": next(self._request_ids), "arg": arg}
        self.dispatch(Action(thunk.pending, meta=meta))

        try:
            result = await call()
        except TalentFlowError as exc:
            return self.dispatch(
                Action(thunk.rejected, payload=str(exc) or thunk.default_error, meta=meta)
            )
        except Exception:
            logger.exception(f"Unexpected error in {thunk.type_prefix}")
            return self.dispatch(Action(thunk.rejected, payload=thunk.default_error, meta=meta))

        payload = to_payload(result) if to_payload else result
        return self.dispatch(Action(thunk.fulfilled, payload=payload, meta=meta))


def filters_case(filters_model: type) -> Callable[[S, Action], S]:
    """
    Reducer case merging a partial filter update into `state.filters`.

    Any filter change moves the page cursor back to 1 unless the update sets
    `page` itself.
    """

    def apply(state: S, action: Action) -> S:
        partial = filters_model.model_validate(action.payload or {})
        update = partial.model_dump(include=partial.model_fields_set)
        if "page" not in partial.model_fields_set:
            update["page"] = 1
        filters = state.filters.model_copy(update=update)
        pagination = state.pagination.model_copy(update={"current_page": filters.page})
        return state.model_copy(update={"filters": filters, "pagination": pagination})

    return apply


def pagination_case(state: S, action: Action) -> S:
    """Reducer case merging a partial update into `state.pagination`."""
    update = dict(action.payload or {})
    unknown = set(update) - set(type(state.pagination).model_fields)
    if unknown:
        raise ValueError(f"Unknown pagination fields: {sorted(unknown)}")
    return state.model_copy(update={"pagination": state.pagination.model_copy(update=update)})
