from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import Any, NamedTuple

import pytest

from tagwire.exceptions import TagwireSignatureParseError
from tagwire.signature import SignatureExtractor, extract_dependency_names


class ServiceA:
    pass


def test_extracts_names_from_function(signature_extractor: SignatureExtractor) -> None:
    def handler(logger: Any, store: Any) -> None:
        pass

    assert signature_extractor.extract(handler) == ("logger", "store")


def test_extracts_names_from_class_constructor(signature_extractor: SignatureExtractor) -> None:
    class Repository:
        def __init__(self, db: Any, cache: Any) -> None:
            self.db = db
            self.cache = cache

    assert signature_extractor.extract(Repository) == ("db", "cache")


def test_extracts_names_from_dataclass(signature_extractor: SignatureExtractor) -> None:
    @dataclass
    class Settings:
        host: str
        port: int

    assert signature_extractor.extract(Settings) == ("host", "port")


def test_extracts_names_from_namedtuple(signature_extractor: SignatureExtractor) -> None:
    class Pair(NamedTuple):
        left: Any
        right: Any

    assert signature_extractor.extract(Pair) == ("left", "right")


def test_class_without_init_has_no_dependencies(signature_extractor: SignatureExtractor) -> None:
    assert signature_extractor.extract(ServiceA) == ()


def test_zero_parameter_function(signature_extractor: SignatureExtractor) -> None:
    assert signature_extractor.extract(lambda: None) == ()


def test_lambda_parameters(signature_extractor: SignatureExtractor) -> None:
    assert signature_extractor.extract(lambda a, b, c: None) == ("a", "b", "c")


def test_default_values_are_ignored(signature_extractor: SignatureExtractor) -> None:
    def handler(logger: Any, retries: int = 3, prefix: str = "(a, b)") -> None:
        pass

    assert signature_extractor.extract(handler) == ("logger", "retries", "prefix")


def test_annotations_do_not_affect_names(signature_extractor: SignatureExtractor) -> None:
    def handler(store: dict[str, tuple[int, int]], logger: Any) -> None:
        pass

    assert signature_extractor.extract(handler) == ("store", "logger")


def test_positional_only_parameters(signature_extractor: SignatureExtractor) -> None:
    def handler(first: Any, second: Any, /) -> None:
        pass

    assert signature_extractor.extract(handler) == ("first", "second")


def test_bound_method_skips_receiver(signature_extractor: SignatureExtractor) -> None:
    class Handler:
        def handle(self, event: Any) -> None:
            pass

        @classmethod
        def build(cls, settings: Any) -> None:
            pass

        @staticmethod
        def parse(payload: Any) -> None:
            pass

    assert signature_extractor.extract(Handler().handle) == ("event",)
    assert signature_extractor.extract(Handler.build) == ("settings",)
    assert signature_extractor.extract(Handler.parse) == ("payload",)


def test_callable_instance_uses_call_signature(signature_extractor: SignatureExtractor) -> None:
    class Factory:
        def __call__(self, settings: Any) -> None:
            pass

    assert signature_extractor.extract(Factory()) == ("settings",)


def test_partial_drops_bound_positional_arguments(
    signature_extractor: SignatureExtractor,
) -> None:
    def handler(prefix: str, logger: Any) -> None:
        pass

    assert signature_extractor.extract(functools.partial(handler, "app")) == ("logger",)


def test_decorated_function_follows_wrapped(signature_extractor: SignatureExtractor) -> None:
    def decorator(func: Any) -> Any:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            return func(*args, **kwargs)

        return wrapper

    @decorator
    def handler(logger: Any) -> None:
        pass

    assert signature_extractor.extract(handler) == ("logger",)


@pytest.mark.parametrize(
    ("provider", "kind"),
    [
        (lambda *values: None, "variadic positional parameter 'values'"),
        (lambda **options: None, "variadic keyword parameter 'options'"),
        (lambda a, *, b: None, "keyword-only parameter 'b'"),
    ],
)
def test_unwirable_parameter_kinds_raise(
    signature_extractor: SignatureExtractor,
    provider: Any,
    kind: str,
) -> None:
    with pytest.raises(TagwireSignatureParseError) as exc_info:
        signature_extractor.extract(provider)

    assert kind in str(exc_info.value)
    assert exc_info.value.provider is provider


def test_error_carries_source_text(signature_extractor: SignatureExtractor) -> None:
    def handler(*events: Any) -> None:
        pass

    with pytest.raises(TagwireSignatureParseError) as exc_info:
        signature_extractor.extract(handler)

    assert exc_info.value.source_text.lstrip().startswith("def handler(*events: Any)")


def test_class_inheriting_variadic_init_raises(signature_extractor: SignatureExtractor) -> None:
    class CustomError(Exception):
        pass

    with pytest.raises(TagwireSignatureParseError):
        signature_extractor.extract(CustomError)


def test_non_callable_raises(signature_extractor: SignatureExtractor) -> None:
    with pytest.raises(TagwireSignatureParseError) as exc_info:
        signature_extractor.extract(42)  # type: ignore[arg-type]

    assert exc_info.value.source_text == "42"
    assert exc_info.value.reason == "object is not callable"


def test_extract_dependency_names_uses_default_extractor() -> None:
    def handler(settings: Any, logger: Any) -> None:
        pass

    assert extract_dependency_names(handler) == ("settings", "logger")


def test_extraction_is_stable_across_calls(signature_extractor: SignatureExtractor) -> None:
    def handler(a: Any, b: Any) -> None:
        pass

    assert signature_extractor.extract(handler) == signature_extractor.extract(handler)
