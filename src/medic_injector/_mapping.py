from __future__ import annotations

import importlib
import logging
from enum import Enum
from typing import TYPE_CHECKING, Any

from ._errors import AlreadySealedError, InvalidSealKeyError, SealedMappingError


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable

    from ._injector import Injector


class Strategy(Enum):
    UNSET = "unset"
    VALUE = "value"
    PROVIDER = "provider"
    TYPE = "type"
    MODULE = "module"


class SealKey:
    """Opaque capability returned by `InjectionMapping.seal()`.

    Keys are compared by identity only; a key cannot be rebuilt from anything
    observable on the mapping.
    """

    __slots__ = ()

    def __init__(self, *, _from_mapping: bool = False) -> None:
        if not _from_mapping:
            msg = "SealKey instances are only created by InjectionMapping.seal()"
            raise RuntimeError(msg)

    def __repr__(self) -> str:
        return f"<SealKey at {id(self):#x}>"

    def __reduce__(self) -> Any:
        msg = "SealKey cannot be pickled"
        raise TypeError(msg)

    def __copy__(self) -> SealKey:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> SealKey:
        return self


class InjectionMapping:
    """A named binding owned by an `Injector`.

    - configure with `to_value` / `to_provider` / `to_type` / `to_module`
    - `as_singleton()` caches the first resolution
    - `seal()` freezes the configuration until `unseal(key)`.

    Builder methods return the mapping itself so calls can be chained:

      injector.add_mapping("db").to_provider(create_db).as_singleton()
    """

    def __init__(self, injector: Injector, name: str) -> None:
        self._injector = injector
        self._name = name
        self._strategy = Strategy.UNSET
        self._target: Any = None
        self._is_singleton = False
        self._has_cached_value = False
        self._cached_value: Any = None
        self._seal_key: SealKey | None = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def strategy(self) -> Strategy:
        return self._strategy

    @property
    def is_singleton(self) -> bool:
        return self._is_singleton

    def to_value(self, payload: Any) -> InjectionMapping:
        """Resolve to `payload` itself, as is."""
        return self._set_strategy(Strategy.VALUE, payload)

    def to_provider(self, provider: Callable[..., Any]) -> InjectionMapping:
        """Resolve to the result of `provider`, whose own parameters are injected by name."""
        self._check_not_sealed("to_provider")
        if not callable(provider):
            msg = f"Provider for mapping {self._name!r} must be callable, got {type(provider).__name__}"
            raise TypeError(msg)
        return self._set_strategy(Strategy.PROVIDER, provider)

    def to_type(self, cls: type) -> InjectionMapping:
        """Resolve to a new `cls()` instance."""
        self._check_not_sealed("to_type")
        if not callable(cls):
            msg = f"Type for mapping {self._name!r} must be callable, got {type(cls).__name__}"
            raise TypeError(msg)
        return self._set_strategy(Strategy.TYPE, cls)

    def to_module(self, module_name: str) -> InjectionMapping:
        """Resolve to the module imported from `module_name` (absolute dotted path)."""
        return self._set_strategy(Strategy.MODULE, module_name)

    def as_singleton(self) -> InjectionMapping:
        self._check_not_sealed("as_singleton")
        self._is_singleton = True
        return self

    def resolve_injection(self) -> Any:
        if self._is_singleton and self._has_cached_value:
            return self._cached_value

        value = self._compute()

        if self._is_singleton:
            self._cached_value = value
            self._has_cached_value = True

        return value

    def seal(self) -> SealKey:
        """Freeze this mapping and return the only key able to unfreeze it."""
        if self._seal_key is not None:
            msg = f"Mapping {self._name!r} is already sealed"
            raise AlreadySealedError(msg)

        self._seal_key = SealKey(_from_mapping=True)
        logger.debug("Sealed mapping '%s'", self._name)
        return self._seal_key

    def unseal(self, key: SealKey | None) -> InjectionMapping:
        if self._seal_key is None or key is not self._seal_key:
            msg = f"Invalid seal key for mapping {self._name!r}"
            raise InvalidSealKeyError(msg)

        self._seal_key = None
        logger.debug("Unsealed mapping '%s'", self._name)
        return self

    def is_sealed(self) -> bool:
        return self._seal_key is not None

    def __repr__(self) -> str:
        flags = []
        if self._is_singleton:
            flags.append("singleton")
        if self.is_sealed():
            flags.append("sealed")
        suffix = f" ({', '.join(flags)})" if flags else ""
        return f"<InjectionMapping {self._name!r}: {self._strategy.value}{suffix}>"

    def _set_strategy(self, strategy: Strategy, target: Any) -> InjectionMapping:
        self._check_not_sealed(f"to_{strategy.value}")
        self._strategy = strategy
        self._target = target
        # a new strategy invalidates whatever the previous one produced
        self._has_cached_value = False
        self._cached_value = None
        return self

    def _check_not_sealed(self, operation: str) -> None:
        if self._seal_key is not None:
            msg = f"Cannot call {operation}() on sealed mapping {self._name!r}"
            raise SealedMappingError(msg)

    def _compute(self) -> Any:
        if self._strategy is Strategy.VALUE:
            return self._target
        if self._strategy is Strategy.PROVIDER:
            return self._injector.trigger_function_with_injected_params(self._target)
        if self._strategy is Strategy.TYPE:
            return self._target()
        if self._strategy is Strategy.MODULE:
            return importlib.import_module(self._target)
        return None
