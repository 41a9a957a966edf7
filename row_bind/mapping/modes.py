"""Mapping mode registry.

Resolves each type's mapping mode once and caches it. A type's own override
wins; otherwise the registry's default applies. Changing the default later
does not affect types that were already resolved.
"""

from __future__ import annotations

import threading

from row_bind.core.enums import MappingMode
from row_bind.core.exceptions import MappingConfigurationError
from row_bind.mapping.builder import declared_mapping
from row_bind.mapping.plan import TypeMapping


class MappingModeRegistry:
    """Holds registered TypeMappings and the resolved mode of every type.

    Args:
        default_mode: Mode used by types that declare no override.
    """

    def __init__(self, default_mode: MappingMode = MappingMode.AUTO) -> None:
        self._default_mode = default_mode
        self._plans: dict[type, TypeMapping] = {}
        self._modes: dict[type, MappingMode] = {}
        self._lock = threading.Lock()

    @property
    def default_mode(self) -> MappingMode:
        return self._default_mode

    @default_mode.setter
    def default_mode(self, mode: MappingMode) -> None:
        self._default_mode = mode

    def register(self, plan: TypeMapping) -> None:
        """Register a TypeMapping, replacing one attached by decorator.

        Raises:
            MappingConfigurationError: If the type's mode was already resolved.
        """
        with self._lock:
            if plan.target_class in self._modes:
                raise MappingConfigurationError(
                    f"Mapping for {plan.target_class.__name__} is already resolved"
                )
            self._plans[plan.target_class] = plan

    def plan_for(self, cls: type) -> TypeMapping:
        """Registered plan, else decorator-attached plan, else an empty plan."""
        plan = self._plans.get(cls)
        if plan is None:
            plan = declared_mapping(cls)
        if plan is None:
            plan = TypeMapping(target_class=cls)
        return plan

    def resolve(self, cls: type, *, commit: bool = True) -> MappingMode:
        """Return the mapping mode for a type, caching it on first use.

        With ``commit=False`` the mode is computed but not cached, leaving
        the type open to registration until :meth:`commit` is called.
        """
        mode = self._modes.get(cls)
        if mode is not None:
            return mode
        with self._lock:
            mode = self._modes.get(cls)
            if mode is None:
                mode = self.plan_for(cls).mode or self._default_mode
                if commit:
                    self._modes[cls] = mode
        return mode

    def commit(self, cls: type, mode: MappingMode) -> None:
        """Cache a mode computed with ``resolve(cls, commit=False)``."""
        with self._lock:
            self._modes.setdefault(cls, mode)

    def is_resolved(self, cls: type) -> bool:
        return cls in self._modes

    def clear(self) -> None:
        """Forget resolved modes. Registered plans are kept."""
        with self._lock:
            self._modes.clear()
