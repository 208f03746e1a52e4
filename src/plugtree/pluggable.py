"""Pluggable wrapper and decorator.

A pluggable wraps an implementation so that any invocation of it, anywhere
in a call tree, can be intercepted by name:

    override hooks   run first, in registration order; the first one that
                     returns something other than ``CONTINUE`` replaces the
                     implementation
    implementation   runs only if every override deferred
    transform hooks  refine the result, left to right

Every invocation works on its own clone of the caller's context, so nested
calls share the hook registry but never each other's dependency bindings.
"""

from __future__ import annotations

import functools
import inspect
import logging
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from plugtree.context import BoundPluggable, Context
from plugtree.profiler import get_profiler
from plugtree.sentinel import is_continue

logger = logging.getLogger(__name__)

ImplementationFn = Callable[..., Any]


async def _resolve(value: Any) -> Any:
    """Await ``value`` if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


class Pluggable:
    """An implementation function interceptable by name.

    Immutable once created.

    Attributes:
        fn: Default implementation, called as ``fn(ctx, *args)``
        name: Key for hook lookup and profiling
        dependencies: Alias to pluggable, bound into ``ctx.deps`` per call
        is_pluggable: Type tag for introspection
    """

    is_pluggable = True

    def __init__(
        self,
        fn: ImplementationFn,
        name: str,
        dependencies: Mapping[str, Pluggable] | None = None,
    ) -> None:
        """Initialize a pluggable.

        Args:
            fn: Implementation; may return a value or an awaitable
            name: Explicit pluggable name
            dependencies: Pluggables this implementation calls via ``ctx.deps``

        Raises:
            TypeError: If fn is not callable or a dependency is not a pluggable
            ValueError: If name is empty
        """
        if not callable(fn):
            raise TypeError(f"Pluggable implementation must be callable, got {type(fn).__name__}")
        if not isinstance(name, str) or not name:
            raise ValueError("Pluggable name must be a non-empty string")

        deps = dict(dependencies or {})
        for alias, dep in deps.items():
            if not isinstance(dep, Pluggable):
                raise TypeError(f"Dependency '{alias}' of '{name}' is not a pluggable: {dep!r}")

        object.__setattr__(self, "fn", fn)
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "dependencies", MappingProxyType(deps))
        object.__setattr__(self, "__doc__", getattr(fn, "__doc__", None))
        object.__setattr__(self, "__wrapped__", fn)

    def __setattr__(self, key: str, value: Any) -> None:
        raise AttributeError(f"Pluggable '{self.name}' is immutable")

    def __delattr__(self, key: str) -> None:
        raise AttributeError(f"Pluggable '{self.name}' is immutable")

    def __repr__(self) -> str:
        deps = ", ".join(self.dependencies)
        return f"Pluggable(name={self.name!r}, dependencies=[{deps}])"

    def bind(self, ctx: Context) -> BoundPluggable:
        """Get an entry point that invokes this pluggable with ``ctx``."""
        return functools.partial(self, ctx)

    async def __call__(self, ctx: Context, *args: Any) -> Any:
        """Invoke the pluggable.

        Args:
            ctx: Caller's context; never modified
            *args: Arguments for overrides and the implementation

        Returns:
            Final result after overrides, implementation and transforms

        Raises:
            Exception: Whatever a hook or the implementation raised
        """
        node_ctx = ctx.derive({alias: dep.bind for alias, dep in self.dependencies.items()})

        profiler = get_profiler()
        conclude = profiler.create_event(self.name) if profiler.active else None

        try:
            result = await self._run(node_ctx, args)
        finally:
            if conclude is not None:
                conclude()

        return result

    async def _run(self, ctx: Context, args: tuple[Any, ...]) -> Any:
        """Dispatch overrides, implementation and transforms on one node."""
        name = self.name
        result = await self._run_overrides(ctx, args)

        transforms = ctx.registry.get_transforms(name)
        if transforms:
            args_list = list(args)
            for transform in transforms:
                result = await _resolve(transform(ctx, result, args_list))
            logger.debug("Applied %d transform(s) to '%s'", len(transforms), name)

        return result

    async def _run_overrides(self, ctx: Context, args: tuple[Any, ...]) -> Any:
        name = self.name

        for index, override in enumerate(ctx.registry.get_overrides(name)):
            result = await _resolve(override(ctx, *args))
            if not is_continue(result):
                logger.debug("Override #%d replaced '%s'", index, name)
                return result

        logger.debug("Running default implementation of '%s'", name)
        return await _resolve(self.fn(ctx, *args))


def wrap(
    fn: ImplementationFn,
    name: str,
    dependencies: Mapping[str, Pluggable] | None = None,
) -> Pluggable:
    """Wrap an implementation into a pluggable.

    Args:
        fn: Implementation, called as ``fn(ctx, *args)``
        name: Explicit pluggable name
        dependencies: Alias to pluggable, exposed to fn as ``ctx.deps[alias]``

    Returns:
        Pluggable instance
    """
    return Pluggable(fn, name, dependencies)


def pluggable(
    name: str,
    dependencies: Mapping[str, Pluggable] | None = None,
) -> Callable[[ImplementationFn], Pluggable]:
    """Decorator form of :func:`wrap`.

    Args:
        name: Explicit pluggable name
        dependencies: Alias to pluggable, exposed as ``ctx.deps[alias]``

    Returns:
        Decorator producing a Pluggable

    Example:
        @pluggable("resolve_module")
        async def resolve_module(ctx: Context, request: str) -> dict:
            ...

        @pluggable("compile_module", dependencies={"resolve": resolve_module})
        async def compile_module(ctx: Context, request: str) -> dict:
            module = await ctx.deps["resolve"](request)
            ...
    """

    def decorator(fn: ImplementationFn) -> Pluggable:
        return Pluggable(fn, name, dependencies)

    return decorator


def is_pluggable(obj: object) -> bool:
    """Check whether an object is a pluggable."""
    return getattr(obj, "is_pluggable", False) is True
