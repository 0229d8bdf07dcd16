"""LangChain AgentMiddleware integration for the pacer library.

Provides :class:`SerializeMiddleware` — a LangChain ``AgentMiddleware``
that queues model calls so they reach the model one request at a time.

Example::

    from langchain.agents import create_agent
    from pacer.integrations.langchain import SerializeMiddleware

    middleware = SerializeMiddleware(group="openai")

    agent = create_agent(
        model="gpt-4.1",
        tools=[...],
        middleware=[middleware],
    )
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pacer.decorator import serialize

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Hashable

    from langchain.agents.middleware import ModelRequest, ModelResponse

    from pacer.core import Serializer
    from pacer.wrapper import ControlledFunction


async def _forward(
    request: ModelRequest,
    handler: Callable[[ModelRequest], Awaitable[ModelResponse]],
) -> ModelResponse:
    return await handler(request)


class SerializeMiddleware:
    """LangChain ``AgentMiddleware`` that serializes async model calls.

    Intercepts ``awrap_model_call`` and sends every request through a
    serialized function. Concurrent agent runs that share this middleware,
    or any middleware or function using the same ``group``, wait for the
    previous model call to finish before sending theirs. A failing call
    fails only its own run.

    Args:
        group: Serialization group shared with other middlewares and
            ``@serialize(group=...)`` functions. ``None`` gives this
            middleware a queue of its own.

    Example::

        from langchain.agents import create_agent
        from pacer.integrations.langchain import SerializeMiddleware

        agent = create_agent(
            model="gpt-4.1",
            tools=[...],
            middleware=[SerializeMiddleware(group="openai")],
        )
    """

    def __init__(self, group: Hashable | object | None = None) -> None:
        self._serializer: Serializer = serialize(group=group)
        self._call: ControlledFunction[Any, Any] = self._serializer(_forward)

    @property
    def serializer(self) -> Serializer:
        """Access the underlying :class:`Serializer`."""
        return self._serializer

    async def awrap_model_call(
        self,
        request: ModelRequest,
        handler: Callable[[ModelRequest], Awaitable[ModelResponse]],
    ) -> ModelResponse:
        """Queue the model call behind any call already in flight."""
        return await self._call(request, handler)
