"""Test listener descriptor parsing and validation."""

import pytest

from promisify_emitter import ConfigurationError, ListenerSpec, On, Once, parse_listener
from promisify_emitter import on, once


def noop(arg):
    pass


class TestParseMapping:
    """Test the mapping form of listener descriptors."""

    def test_on_handler_becomes_persistent_mode(self):
        spec = parse_listener({"name": "progress", "on": noop})

        assert spec == ListenerSpec("progress", On(noop))
        assert spec.method == "on"
        assert spec.handler is noop

    def test_once_handler_becomes_one_shot_mode(self):
        spec = parse_listener({"name": "ready", "once": noop})

        assert isinstance(spec.mode, Once)
        assert spec.method == "once"

    def test_capture_flags_default_to_false(self):
        spec = parse_listener({"name": "x", "on": noop})

        assert spec.is_result is False
        assert spec.is_error is False

    def test_snake_case_flags(self):
        spec = parse_listener({"name": "row", "on": noop, "is_result": True, "is_error": True})

        assert spec.is_result is True
        assert spec.is_error is True

    def test_camel_case_keys(self):
        spec = parse_listener({"eventName": "fail", "once": noop, "isError": True})

        assert spec.event_name == "fail"
        assert spec.is_error is True
        assert spec.is_result is False

    def test_event_name_key(self):
        spec = parse_listener({"event_name": "row", "on": noop, "isResult": 1})

        assert spec.event_name == "row"
        assert spec.is_result is True


class TestValidation:
    """Test descriptor violations raise ConfigurationError with a code."""

    def test_missing_name(self):
        with pytest.raises(ConfigurationError, match="listener option must have a name") as excinfo:
            parse_listener({"on": noop}, index=3)

        assert excinfo.value.code == "missing_listener_name"
        assert excinfo.value.details == {"index": 3}

    def test_empty_name(self):
        with pytest.raises(ConfigurationError) as excinfo:
            parse_listener({"name": "", "on": noop})

        assert excinfo.value.code == "missing_listener_name"

    def test_non_string_name(self):
        with pytest.raises(ConfigurationError) as excinfo:
            parse_listener({"name": 42, "on": noop})

        assert excinfo.value.code == "invalid_listener_name"

    def test_missing_both_handlers(self):
        with pytest.raises(ConfigurationError, match='must have a "once" or "on" function') as excinfo:
            parse_listener({"name": "data", "is_result": True})

        assert excinfo.value.code == "missing_listener_handler"
        assert excinfo.value.details["event"] == "data"

    def test_both_handlers_rejected(self):
        with pytest.raises(ConfigurationError) as excinfo:
            parse_listener({"name": "data", "on": noop, "once": noop})

        assert excinfo.value.code == "ambiguous_listener_handler"

    def test_on_not_callable(self):
        with pytest.raises(ConfigurationError, match='"on" must be a function') as excinfo:
            parse_listener({"name": "data", "on": "nope"})

        assert excinfo.value.code == "invalid_listener_handler"
        assert excinfo.value.details["slot"] == "on"
        assert excinfo.value.details["type"] == "str"

    def test_once_not_callable(self):
        with pytest.raises(ConfigurationError, match='"once" must be a function'):
            parse_listener({"name": "data", "once": 5})

    def test_not_a_mapping(self):
        with pytest.raises(ConfigurationError) as excinfo:
            parse_listener(["data", noop], index=0)

        assert excinfo.value.code == "invalid_listener"

    def test_is_configuration_error_subclass_of_base(self):
        from promisify_emitter import PromisifyError

        with pytest.raises(PromisifyError):
            parse_listener({"on": noop})


class TestListenerSpec:
    """Test ListenerSpec instances pass through validation."""

    def test_valid_spec_returned_unchanged(self):
        spec = ListenerSpec("end", Once(noop))

        assert parse_listener(spec) is spec

    def test_spec_with_bad_mode(self):
        spec = ListenerSpec("end", noop)

        with pytest.raises(ConfigurationError) as excinfo:
            parse_listener(spec, index=1)

        assert excinfo.value.code == "invalid_listener_mode"

    def test_spec_with_uncallable_handler(self):
        with pytest.raises(ConfigurationError) as excinfo:
            parse_listener(ListenerSpec("x", On(None)))

        assert excinfo.value.details["slot"] == "on"

    def test_spec_with_empty_name(self):
        with pytest.raises(ConfigurationError):
            parse_listener(ListenerSpec("", On(noop)))

    def test_shorthands(self):
        assert on("row", noop, is_result=True) == ListenerSpec("row", On(noop), is_result=True)
        assert once("fail", noop, is_error=True) == ListenerSpec("fail", Once(noop), is_error=True)

    def test_shorthand_validates(self):
        with pytest.raises(ConfigurationError):
            on("row", "not callable")

    def test_spec_is_frozen(self):
        spec = ListenerSpec("row", On(noop))

        with pytest.raises(AttributeError):
            spec.event_name = "other"
