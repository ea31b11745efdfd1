from __future__ import annotations


class InjectorError(RuntimeError):
    pass


class DuplicateMappingError(InjectorError):
    """Raised by `Injector.add_mapping` when the name is already registered."""


class SealedMappingError(InjectorError):
    """Raised when a sealed mapping is reconfigured or removed."""


class AlreadySealedError(InjectorError):
    pass


class InvalidSealKeyError(InjectorError):
    """Raised by `InjectionMapping.unseal` when the key is not the one returned by `seal()`."""
