"""Tests for verifying import styles work correctly."""


class TestFlatImports:
    """Verify flat imports from klaw_option work."""

    def test_option_types(self) -> None:
        from klaw_option import Option, is_option, none, some

        assert some(42).unwrap() == 42
        assert none().is_none()
        option: Option[int] = some(1)
        assert is_option(option)

    def test_async_types(self) -> None:
        from klaw_option import PendingOption, ReplaceTrigger

        assert PendingOption is not None
        assert ReplaceTrigger is not None

    def test_result_types(self) -> None:
        from klaw_option import Err, Ok, Result, err, is_result, ok

        result: Result[int, str] = ok(1)
        assert result == Ok(1)
        assert err('e') == Err('e')
        assert is_result(result)

    def test_errors(self) -> None:
        from klaw_option import ErrorReason, OptionError, OptionFailure

        assert issubclass(OptionError, Exception)
        assert OptionFailure(ErrorReason.NONE_EXPECTED, 'm').to_exception().reason is ErrorReason.NONE_EXPECTED

    def test_free_functions(self) -> None:
        from klaw_option import and_opt, none, or_opt, some, xor_opt

        assert and_opt(some(1), some(2)) == some(2)
        assert or_opt(none(), some(2)) == some(2)
        assert xor_opt(some(1), some(2)) == none()

    def test_config_and_logging(self) -> None:
        from klaw_option import (
            OptionConfig,
            add_log_hook,
            configure_logging,
            get_config,
            get_logger,
            init,
            remove_log_hook,
        )

        assert isinstance(get_config(), OptionConfig)
        assert callable(init)
        assert callable(configure_logging)
        assert callable(get_logger)
        assert callable(add_log_hook)
        assert callable(remove_log_hook)

    def test_protocol(self) -> None:
        from klaw_option import OptionCombinators, some

        assert isinstance(some(1), OptionCombinators)

    def test_all_is_complete(self) -> None:
        import klaw_option

        for name in klaw_option.__all__:
            assert hasattr(klaw_option, name), name


class TestSubmoduleImports:
    """Verify submodule imports work."""

    def test_submodules(self) -> None:
        from klaw_option.errors import OptionError
        from klaw_option.option import Option, some
        from klaw_option.pending import PendingOption
        from klaw_option.protocols import OptionCombinators
        from klaw_option.result import Ok

        assert isinstance(some(1), Option)
        assert isinstance(PendingOption.from_option(some(1)), OptionCombinators)
        assert Ok(1).ok() == some(1)
        assert issubclass(OptionError, Exception)
