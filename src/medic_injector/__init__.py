"""Name-keyed dependency injection.

This package binds symbolic names to values, provider functions, types or
modules, and resolves those bindings on demand: directly, as the arguments of
any callable (matched by parameter name), as attributes of an existing object,
or inside `${name}` string templates.

Exports:
- `Injector`: registry of mappings plus the injection entry points.
- `InjectionMapping`: a single named binding, with optional singleton caching
  and seal/unseal protection.
- `SealKey`: opaque token returned by `InjectionMapping.seal()`.
- `Strategy`: enum of the resolution strategies a mapping can hold
  (unset, value, provider, type, module).
- `InjectorError` and its subclasses `DuplicateMappingError`,
  `SealedMappingError`, `AlreadySealedError`, `InvalidSealKeyError`.
"""

from ._errors import (
    AlreadySealedError,
    DuplicateMappingError,
    InjectorError,
    InvalidSealKeyError,
    SealedMappingError,
)
from ._injector import Injector
from ._mapping import InjectionMapping, SealKey, Strategy


__all__ = [
    "AlreadySealedError",
    "DuplicateMappingError",
    "InjectionMapping",
    "Injector",
    "InjectorError",
    "InvalidSealKeyError",
    "SealKey",
    "SealedMappingError",
    "Strategy",
]
