from __future__ import annotations

import inspect
import logging
import re
import threading
import types
from typing import TYPE_CHECKING, Any, TypeVar

from ._errors import DuplicateMappingError, SealedMappingError
from ._mapping import InjectionMapping


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable

    T = TypeVar("T")

DEFAULT_POST_INJECTIONS_CALLBACK_NAME = "post_injections"

_TEMPLATE_TOKEN = re.compile(r"\$\{(\w+)\}")


class Injector:
    """Name-keyed DI registry.

    - bind names to values, providers, types or modules via `add_mapping`
    - call functions with their parameters resolved by name
    - fill `None` attributes of objects whose names are mapped
    - interpolate `${name}` tokens in strings.

    After `inject_into`, the instance method named by
    `instance_post_injections_callback_name` is called. It defaults to
    `post_injections` (snake_case); an object that only defines `postInjections`
    needs `Injector(instance_post_injections_callback_name="postInjections")`.
    """

    def __init__(self, *, instance_post_injections_callback_name: str = DEFAULT_POST_INJECTIONS_CALLBACK_NAME) -> None:
        self.instance_post_injections_callback_name = instance_post_injections_callback_name
        self._mappings: dict[str, InjectionMapping] = {}
        self._lock = threading.RLock()

    def add_mapping(self, name: str) -> InjectionMapping:
        """Register a new, unconfigured mapping and return it for configuration.

        Example:
          injector.add_mapping("db_url").to_value("sqlite://")
          injector.add_mapping("db").to_provider(lambda db_url: connect(db_url)).as_singleton()

        """
        with self._lock:
            if name in self._mappings:
                msg = f"Mapping {name!r} is already registered"
                raise DuplicateMappingError(msg)

            mapping = InjectionMapping(self, name)
            self._mappings[name] = mapping

        logger.debug("Added mapping '%s'", name)
        return mapping

    def get_mapping(self, name: str) -> InjectionMapping | None:
        return self._mappings.get(name)

    def has_mapping(self, name: str) -> bool:
        return name in self._mappings

    def remove_mapping(self, name: str) -> None:
        with self._lock:
            mapping = self._mappings.get(name)
            if mapping is None:
                return

            if mapping.is_sealed():
                msg = f"Cannot remove sealed mapping {name!r}"
                raise SealedMappingError(msg)

            del self._mappings[name]

        logger.debug("Removed mapping '%s'", name)

    def trigger_function_with_injected_params(self, func: Callable[..., T], context: object = None) -> T:
        """Call `func` with each of its parameters resolved from the mapping of the same name.

        Parameters without a mapping receive None. When `context` is given, `func`
        is bound to it like a method: `context` fills the first parameter and the
        remaining ones are injected. A bound method given with a context is
        rebound to that context instead of its original instance.
        """
        if context is not None:
            if inspect.ismethod(func):
                func = func.__func__
            func = types.MethodType(func, context)

        args, kwargs = self._materialize_call(inspect.signature(func))
        return func(*args, **kwargs)

    def inject_into(self, instance: T, inject_post_injections_params: bool = False) -> T:  # noqa: FBT001, FBT002
        """Assign mapped values to the instance's own attributes that are currently None.

        Afterwards the instance's post-injections hook, if any, is called once;
        with `inject_post_injections_params` its parameters are injected by name too.
        """
        for attr_name, current in list(_own_attributes(instance).items()):
            if current is not None:
                continue

            mapping = self.get_mapping(attr_name)
            if mapping is not None:
                setattr(instance, attr_name, mapping.resolve_injection())

        hook = getattr(instance, self.instance_post_injections_callback_name, None)
        if callable(hook):
            if inject_post_injections_params:
                self.trigger_function_with_injected_params(hook)
            else:
                hook()

        return instance

    def cancel_injections_into(self, instance: T) -> T:
        """Reset to None every own attribute of `instance` whose name is mapped.

        The instance is then ready for another `inject_into`.
        """
        for attr_name in list(_own_attributes(instance)):
            if self.has_mapping(attr_name):
                setattr(instance, attr_name, None)

        return instance

    def create_injected_instance(self, cls: Callable[[], T], inject_post_injections_params: bool = False) -> T:  # noqa: FBT001, FBT002
        return self.inject_into(cls(), inject_post_injections_params)

    def parse_str(self, source: str) -> str:
        """Replace every `${name}` token of `source`.

        Mapped names become the text of their resolved value; unmapped names and
        None values become empty strings.
        """

        def replace(match: re.Match[str]) -> str:
            value = self._resolve_name(match.group(1))
            return "" if value is None else str(value)

        return _TEMPLATE_TOKEN.sub(replace, source)

    def __repr__(self) -> str:
        return f"<Injector mappings={sorted(self._mappings)!r}>"

    def _resolve_name(self, name: str) -> Any:
        mapping = self.get_mapping(name)
        if mapping is None:
            return None
        return mapping.resolve_injection()

    def _materialize_call(self, sig: inspect.Signature) -> tuple[list[Any], dict[str, Any]]:
        args, kwargs = [], {}

        # declaration order is resolution order
        for name, p in sig.parameters.items():
            if p.kind in (p.VAR_POSITIONAL, p.VAR_KEYWORD):
                continue

            value = self._resolve_name(name)
            if p.kind is p.KEYWORD_ONLY:
                kwargs[name] = value
            else:
                args.append(value)

        return args, kwargs


def _own_attributes(instance: object) -> dict[str, Any]:
    try:
        return vars(instance)
    except TypeError:
        # __slots__ classes have no instance __dict__
        attributes: dict[str, Any] = {}
        for cls in type(instance).__mro__:
            slots = getattr(cls, "__slots__", ())
            if isinstance(slots, str):
                slots = (slots,)
            for slot in slots:
                if slot not in ("__weakref__", "__dict__") and hasattr(instance, slot):
                    attributes[slot] = getattr(instance, slot)
        return attributes
