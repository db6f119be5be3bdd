"""Tests for OptionError, OptionFailure and ErrorReason."""

import msgspec
import pytest
from klaw_option import Err, ErrorReason, OptionError, OptionFailure, init, none, some


class TestErrorReason:
    """Tests for the reason codes."""

    def test_values(self):
        assert ErrorReason.NONE_VALUE_ACCESSED == 'NoneValueAccessed'
        assert ErrorReason.NONE_EXPECTED == 'NoneExpected'
        assert ErrorReason.NONE_UNWRAPPED == 'NoneUnwrapped'
        assert ErrorReason.PREDICATE_EXCEPTION == 'PredicateException'

    def test_lookup_by_value(self):
        assert ErrorReason('NoneUnwrapped') is ErrorReason.NONE_UNWRAPPED


class TestOptionError:
    """Tests for the exception variant."""

    def test_fields(self):
        error = OptionError('msg', ErrorReason.NONE_EXPECTED)
        assert error.message == 'msg'
        assert error.reason is ErrorReason.NONE_EXPECTED
        assert error.original is None
        assert error.__cause__ is None
        assert str(error) == 'msg'

    def test_original_becomes_cause(self):
        original = ValueError('inner')
        error = OptionError('msg', ErrorReason.PREDICATE_EXCEPTION, original)
        assert error.original is original
        assert error.__cause__ is original

    def test_repr(self):
        error = OptionError('msg', ErrorReason.NONE_UNWRAPPED)
        assert repr(error) == "OptionError('msg', reason=NoneUnwrapped)"

    def test_is_exception(self):
        with pytest.raises(Exception, match='`unwrap` is called on `None`'):
            none().unwrap()

    def test_raised_cause_chain(self):
        def failing():
            raise KeyError('missing')

        with pytest.raises(OptionError) as exc_info:
            none().unwrap_or_else(failing)
        assert isinstance(exc_info.value.__cause__, KeyError)


class TestOptionFailure:
    """Tests for the struct variant and conversions."""

    def test_to_struct(self):
        error = OptionError('msg', ErrorReason.NONE_UNWRAPPED)
        assert error.to_struct() == OptionFailure(ErrorReason.NONE_UNWRAPPED, 'msg')

    def test_to_struct_renders_cause(self):
        error = OptionError('msg', ErrorReason.PREDICATE_EXCEPTION, ValueError('inner'))
        failure = error.to_struct()
        assert failure.cause == "ValueError('inner')"

    def test_to_struct_respects_stringify_limit(self):
        init(stringify_limit=10)
        error = OptionError('msg', ErrorReason.PREDICATE_EXCEPTION, ValueError('x' * 50))
        failure = error.to_struct()
        assert failure.cause is not None
        assert len(failure.cause) == 10
        assert failure.cause.endswith('...')

    def test_to_exception(self):
        failure = OptionFailure(ErrorReason.NONE_EXPECTED, 'msg')
        error = failure.to_exception()
        assert isinstance(error, OptionError)
        assert error.reason is ErrorReason.NONE_EXPECTED
        assert error.message == 'msg'

    def test_is_frozen(self):
        failure = OptionFailure(ErrorReason.NONE_EXPECTED, 'msg')
        with pytest.raises(AttributeError):
            failure.message = 'other'  # type: ignore[misc]

    def test_msgspec_roundtrip(self):
        failure = OptionFailure(ErrorReason.PREDICATE_EXCEPTION, 'msg', 'ValueError()')
        encoded = msgspec.json.encode(failure)
        assert msgspec.json.decode(encoded, type=OptionFailure) == failure

    def test_as_result_error(self):
        """A failure can ride in a Result for code that avoids raising."""
        try:
            value = none().expect('no user')
        except OptionError as exc:
            result = Err(exc.to_struct())
        else:
            result = some(value)
        assert result.unwrap_err().reason is ErrorReason.NONE_EXPECTED
