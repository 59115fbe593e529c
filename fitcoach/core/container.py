"""Dependency injection container.

A small service locator mapping string tokens to classes, factories or plain
values. Bindings are transient unless registered with a singleton lifetime;
values bound with ``to_value`` are always singletons.
"""

import enum
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional


class ServiceLifetime(enum.Enum):
    transient = "transient"
    singleton = "singleton"


class BindingType(enum.Enum):
    constructor = "constructor"
    factory = "factory"
    value = "value"


class ServiceNotBoundError(LookupError):
    """Raised when resolving a token that has no binding."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"No binding found for token: {token}")


@dataclass
class ServiceBinding:
    type: BindingType
    value: Any
    lifetime: ServiceLifetime = ServiceLifetime.transient
    instance: Any = None
    has_instance: bool = False


class BindingBuilder:
    """Fluent builder returned by ``Container.bind``."""

    def __init__(self, container: "Container", token: str):
        self._container = container
        self._token = token

    def to(self, implementation: type, lifetime: ServiceLifetime = ServiceLifetime.transient) -> None:
        self._container.register(
            self._token,
            ServiceBinding(type=BindingType.constructor, value=implementation, lifetime=lifetime),
        )

    def to_factory(
        self, factory: Callable[[], Any], lifetime: ServiceLifetime = ServiceLifetime.transient
    ) -> None:
        self._container.register(
            self._token,
            ServiceBinding(type=BindingType.factory, value=factory, lifetime=lifetime),
        )

    def to_value(self, value: Any) -> None:
        self._container.register(
            self._token,
            ServiceBinding(type=BindingType.value, value=value, lifetime=ServiceLifetime.singleton),
        )


class Container:
    def __init__(self):
        self._bindings: Dict[str, ServiceBinding] = {}

    def bind(self, token: str) -> BindingBuilder:
        return BindingBuilder(self, token)

    def register(self, token: str, binding: ServiceBinding) -> None:
        self._bindings[token] = binding

    def resolve(self, token: str) -> Any:
        binding: Optional[ServiceBinding] = self._bindings.get(token)
        if binding is None:
            raise ServiceNotBoundError(token)

        if binding.lifetime is ServiceLifetime.singleton and binding.has_instance:
            return binding.instance

        if binding.type is BindingType.constructor:
            instance = binding.value()
        elif binding.type is BindingType.factory:
            instance = binding.value()
        elif binding.type is BindingType.value:
            instance = binding.value
        else:
            raise ValueError(f"Unknown binding type for token: {token}")

        if binding.lifetime is ServiceLifetime.singleton:
            binding.instance = instance
            binding.has_instance = True

        return instance

    def is_bound(self, token: str) -> bool:
        return token in self._bindings

    def clear(self) -> None:
        """Drop every binding (used by tests)."""
        self._bindings.clear()


container = Container()
