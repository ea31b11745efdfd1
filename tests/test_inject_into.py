import unittest

import pytest

from medic_injector import Injector


class TestInjectInto(unittest.TestCase):
    injector: Injector

    def setUp(self):
        self.injector = Injector()

    def test_injects_none_attributes_and_ignores_others(self):
        class Target:
            def __init__(self):
                self.injection1 = None
                self.injection2 = "not none"
                self.injection3 = None

        self.injector.add_mapping("injection1").to_value(10)
        self.injector.add_mapping("injection2").to_value(20)

        target = self.injector.inject_into(Target())

        assert target.injection1 == 10
        assert target.injection2 == "not none"
        assert target.injection3 is None

    def test_falsy_non_none_attributes_are_not_overwritten(self):
        class Target:
            def __init__(self):
                self.count = 0
                self.label = ""

        self.injector.add_mapping("count").to_value(10)
        self.injector.add_mapping("label").to_value("x")

        target = self.injector.inject_into(Target())

        assert target.count == 0
        assert target.label == ""

    def test_class_attributes_are_not_injected(self):
        class Target:
            injection1 = None

        self.injector.add_mapping("injection1").to_value(10)

        target = self.injector.inject_into(Target())

        assert target.injection1 is None
        assert "injection1" not in vars(target)

    def test_slots_attributes_are_injected(self):
        class Target:
            __slots__ = ("injection1", "injection2")

            def __init__(self):
                self.injection1 = None
                self.injection2 = "kept"

        self.injector.add_mapping("injection1").to_value(10)
        self.injector.add_mapping("injection2").to_value(20)

        target = self.injector.inject_into(Target())

        assert target.injection1 == 10
        assert target.injection2 == "kept"

    def test_triggers_post_injections_once(self):
        calls = []

        class Target:
            def __init__(self):
                self.injection1 = None

            def post_injections(self):
                calls.append(self.injection1)

            def custom_post_injections(self):
                calls.append("custom")

        self.injector.add_mapping("injection1").to_value(10)

        self.injector.inject_into(Target())

        assert calls == [10]

    def test_triggers_custom_post_injections_method(self):
        calls = []

        class Target:
            def __init__(self):
                self.injection1 = None

            def post_injections(self):
                calls.append("default")

            def custom_post_injections(self):
                calls.append(self.injection1)

        self.injector.instance_post_injections_callback_name = "custom_post_injections"
        self.injector.add_mapping("injection1").to_value(10)

        self.injector.inject_into(Target())

        assert calls == [10]

    def test_callback_name_as_constructor_argument(self):
        injector = Injector(instance_post_injections_callback_name="ready")
        calls = []

        class Target:
            def ready(self):
                calls.append(1)

        injector.inject_into(Target())

        assert injector.instance_post_injections_callback_name == "ready"
        assert calls == [1]

    def test_camel_case_hook_needs_explicit_callback_name(self):
        calls = []

        class Target:
            def postInjections(self):
                calls.append(1)

        self.injector.inject_into(Target())
        assert calls == []

        Injector(instance_post_injections_callback_name="postInjections").inject_into(Target())
        assert calls == [1]

    def test_non_callable_post_injections_attribute_is_ignored(self):
        class Target:
            def __init__(self):
                self.post_injections = None

        self.injector.add_mapping("post_injections").to_value("not callable")

        target = self.injector.inject_into(Target())

        assert target.post_injections == "not callable"

    def test_post_injections_params_are_injected_when_asked(self):
        received = []

        class Target:
            def __init__(self):
                self.injection1 = None

            def post_injections(self, injection1, injection2):
                received.append((self.injection1, injection1, injection2))

        self.injector.add_mapping("injection1").to_value(10)
        self.injector.add_mapping("injection2").to_provider(lambda: 20)

        self.injector.inject_into(Target(), True)

        assert received == [(10, 10, 20)]

    def test_post_injections_params_are_not_injected_by_default(self):
        class Target:
            def post_injections(self, injection1):
                pass

        self.injector.add_mapping("injection1").to_value(10)

        with pytest.raises(TypeError):
            self.injector.inject_into(Target())

    def test_cancel_injections_into(self):
        class Target:
            def __init__(self):
                self.injection1 = None
                self.injection2 = None
                self.other = "kept"

        self.injector.add_mapping("injection1").to_value(10)
        self.injector.add_mapping("injection2").to_provider(lambda: 20)

        target = self.injector.inject_into(Target())
        assert (target.injection1, target.injection2) == (10, 20)

        self.injector.cancel_injections_into(target)
        assert (target.injection1, target.injection2, target.other) == (None, None, "kept")

        self.injector.get_mapping("injection1").to_value(11)
        self.injector.inject_into(target)
        assert (target.injection1, target.injection2) == (11, 20)


class TestCreateInjectedInstance(unittest.TestCase):
    def test_gives_fully_injected_instance(self):
        injector = Injector()

        class Target:
            def __init__(self):
                self.injection1 = None
                self.value_from_post_injections = None

            def post_injections(self, injection2):
                self.value_from_post_injections = injection2

        injector.add_mapping("injection1").to_value(10)
        injector.add_mapping("injection2").to_provider(lambda: 20)

        target = injector.create_injected_instance(Target, True)

        assert isinstance(target, Target)
        assert target.injection1 == 10
        assert target.value_from_post_injections == 20

    def test_singleton_mapping_is_shared_between_instances(self):
        injector = Injector()

        class Service: ...

        class Target:
            def __init__(self):
                self.service = None

        injector.add_mapping("service").to_type(Service).as_singleton()

        first = injector.create_injected_instance(Target)
        second = injector.create_injected_instance(Target)

        assert isinstance(first.service, Service)
        assert first.service is second.service
