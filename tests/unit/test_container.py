"""
Unit tests for the dependency-injection container and module setup.
"""

import pytest

from fitcoach.core.container import Container, ServiceLifetime, ServiceNotBoundError
from fitcoach.core.setup import SERVICES, setup_modules
from fitcoach.services.local_auth import LocalAuthService
from fitcoach.services.local_dashboard import LocalDashboardService
from fitcoach.services.local_storage import KeyValueFile, LocalDataStore
from fitcoach.services.student import StudentService


class Widget:
    pass


class TestContainer:
    def test_transient_binding_builds_new_instances(self):
        container = Container()
        container.bind("Widget").to(Widget)

        first = container.resolve("Widget")
        second = container.resolve("Widget")

        assert isinstance(first, Widget)
        assert first is not second

    def test_singleton_binding_is_cached(self):
        container = Container()
        container.bind("Widget").to(Widget, ServiceLifetime.singleton)

        assert container.resolve("Widget") is container.resolve("Widget")

    def test_factory_binding(self):
        calls = []
        container = Container()
        container.bind("Answer").to_factory(lambda: calls.append(1) or 42)

        assert container.resolve("Answer") == 42
        assert container.resolve("Answer") == 42
        assert len(calls) == 2

    def test_value_binding(self):
        value = object()
        container = Container()
        container.bind("Value").to_value(value)

        assert container.resolve("Value") is value

    def test_unbound_token(self):
        """
        Test resolving an unknown token.

        This test ensures that the error names the missing token.
        """
        container = Container()

        with pytest.raises(ServiceNotBoundError) as exc_info:
            container.resolve("Missing")

        assert exc_info.value.token == "Missing"
        assert "Missing" in str(exc_info.value)

    def test_rebinding_replaces_previous_binding(self):
        container = Container()
        container.bind("Value").to_value(1)
        container.bind("Value").to_value(2)

        assert container.resolve("Value") == 2

    def test_clear(self):
        container = Container()
        container.bind("Widget").to(Widget)

        container.clear()

        assert container.is_bound("Widget") is False


class TestSetupModules:
    def test_every_service_is_bound(self, tmp_path):
        container = setup_modules(Container())
        store = LocalDataStore(KeyValueFile(str(tmp_path / "storage.json")))
        container.bind("LocalDataStore").to_value(store)

        for token in SERVICES:
            assert container.is_bound(token)
        assert isinstance(container.resolve("StudentService"), StudentService)

    def test_local_services_share_the_store(self, tmp_path):
        container = setup_modules(Container())
        store = LocalDataStore(KeyValueFile(str(tmp_path / "storage.json")))
        container.bind("LocalDataStore").to_value(store)

        auth = container.resolve("LocalAuthService")
        dashboard = container.resolve("LocalDashboardService")

        assert isinstance(auth, LocalAuthService)
        assert isinstance(dashboard, LocalDashboardService)
        assert auth.store is store
        assert dashboard.store is store
        assert container.resolve("LocalAuthService") is auth
        assert container.resolve("LocalDashboardService") is not dashboard
