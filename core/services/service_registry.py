#!/usr/bin/env python3
"""
Service registry with dependency injection

Controllers look services up by interface so tests can swap in fakes
(for instance an IExportExecutor that never starts ffmpeg).
"""
from typing import Any, Callable, Dict, List, Type, TypeVar
import threading

T = TypeVar('T')


class ServiceRegistry:
    """Thread-safe service registry; export workers resolve services off the UI thread"""

    def __init__(self):
        self._factories: Dict[Type, Callable[[], Any]] = {}
        self._singletons: Dict[Type, Any] = {}
        self._lock = threading.RLock()

    def register_singleton(self, interface: Type[T], implementation: T):
        """Register singleton service instance"""
        with self._lock:
            self._factories.pop(interface, None)
            self._singletons[interface] = implementation

    def register_factory(self, interface: Type[T], factory: Callable[[], T]):
        """Register service factory, called on every lookup"""
        with self._lock:
            self._singletons.pop(interface, None)
            self._factories[interface] = factory

    def get_service(self, interface: Type[T]) -> T:
        """Get service instance for an interface

        Raises:
            ValueError: nothing registered for the interface
        """
        with self._lock:
            if interface in self._singletons:
                return self._singletons[interface]

            if interface in self._factories:
                return self._factories[interface]()

            raise ValueError(f"Service {interface.__name__} not registered")

    def is_registered(self, interface: Type) -> bool:
        with self._lock:
            return interface in self._singletons or interface in self._factories

    def unregister(self, interface: Type):
        with self._lock:
            self._singletons.pop(interface, None)
            self._factories.pop(interface, None)

    def registered_interfaces(self) -> List[Type]:
        with self._lock:
            return list(self._singletons) + list(self._factories)

    def clear(self):
        """Clear all registrations (for testing)"""
        with self._lock:
            self._factories.clear()
            self._singletons.clear()


# Global service registry
_service_registry = ServiceRegistry()


def get_service_registry() -> ServiceRegistry:
    return _service_registry


def get_service(interface: Type[T]) -> T:
    """Convenience function to get service"""
    return _service_registry.get_service(interface)


def register_service(interface: Type[T], implementation: T):
    """Convenience function to register singleton service"""
    _service_registry.register_singleton(interface, implementation)


def register_factory(interface: Type[T], factory: Callable[[], T]):
    """Convenience function to register service factory"""
    _service_registry.register_factory(interface, factory)
