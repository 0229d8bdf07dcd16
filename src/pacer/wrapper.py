"""Callable wrapper returned by ``throttle``, ``debounce`` and ``serialize``."""

import asyncio
import functools
from collections.abc import Callable
from typing import Any, Generic, ParamSpec, TypeVar

from pacer._futures import Thunk
from pacer._sync import get_shared_loop
from pacer.routing import GLOBAL, RoutingTable

P = ParamSpec("P")
R = TypeVar("R")

Dispatch = Callable[[Any, Thunk[Any]], asyncio.Future[Any]]


def _ensure_loop(name: str) -> None:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        raise RuntimeError(
            f"{name}() must be called from a running event loop; "
            f"use {name}.blocking() from synchronous code"
        ) from None


class ControlledFunction(Generic[P, R]):
    """A function whose calls are routed through a rate controller.

    Calling it returns an :class:`asyncio.Future` for the wrapped
    function's eventual value, whether the wrapped function is sync or
    async. Accessed through an instance it binds like a method, and the
    instance becomes the routing receiver.

    Attributes:
        controller: The ``Throttler``/``Debouncer``/``Serializer`` that
            produced this wrapper.
        routes: The routing table holding the live windows or queues.
    """

    def __init__(
        self,
        fn: Callable[P, Any],
        dispatch: Dispatch,
        *,
        controller: Any,
        routes: RoutingTable[Any],
    ) -> None:
        self._fn = fn
        self._dispatch = dispatch
        self.controller = controller
        self.routes = routes
        self._name = getattr(fn, "__name__", repr(fn))
        functools.update_wrapper(self, fn)

    def __call__(self, *args: P.args, **kwargs: P.kwargs) -> asyncio.Future[R]:
        _ensure_loop(self._name)
        return self._dispatch(GLOBAL, functools.partial(self._fn, *args, **kwargs))

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return BoundControlledFunction(self, instance)

    def blocking(self, *args: P.args, **kwargs: P.kwargs) -> R:
        """Call through the shared background loop and wait for the result."""

        async def call() -> R:
            return await self(*args, **kwargs)

        return get_shared_loop().run_coroutine(call())

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._name} via {self.controller!r}>"


class BoundControlledFunction:
    """A :class:`ControlledFunction` bound to an instance."""

    __slots__ = ("__func__", "__self__")

    def __init__(self, func: ControlledFunction[Any, Any], instance: Any) -> None:
        self.__func__ = func
        self.__self__ = instance

    @property
    def __name__(self) -> str:
        return self.__func__._name

    def __call__(self, *args: Any, **kwargs: Any) -> asyncio.Future[Any]:
        func = self.__func__
        _ensure_loop(func._name)
        thunk = functools.partial(func._fn, self.__self__, *args, **kwargs)
        return func._dispatch(self.__self__, thunk)

    def blocking(self, *args: Any, **kwargs: Any) -> Any:
        """Call through the shared background loop and wait for the result."""

        async def call() -> Any:
            return await self(*args, **kwargs)

        return get_shared_loop().run_coroutine(call())

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, BoundControlledFunction)
            and other.__func__ is self.__func__
            and other.__self__ is self.__self__
        )

    def __hash__(self) -> int:
        return hash((id(self.__func__), id(self.__self__)))

    def __repr__(self) -> str:
        return f"<bound {self.__func__._name} of {self.__self__!r}>"
