"""Parameter-name extraction for auto-wiring.

A callable's formal parameter names double as the tags of its dependencies.
Names come from ``inspect.signature``, so defaults and annotations play no
part: ``def handler(logger, retries=3)`` depends on the tags ``"logger"`` and
``"retries"``. Parameters that cannot be filled positionally from a tag list
(``*args``, ``**kwargs``, keyword-only parameters) are rejected rather than
skipped, since silently dropping them would build a half-wired object.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from inspect import Parameter
from typing import Any

from tagwire.exceptions import TagwireSignatureParseError

_WIRABLE_PARAMETER_KINDS = frozenset(
    {
        Parameter.POSITIONAL_ONLY,
        Parameter.POSITIONAL_OR_KEYWORD,
    },
)
_PARAMETER_KIND_DESCRIPTIONS = {
    Parameter.VAR_POSITIONAL: "variadic positional parameter",
    Parameter.VAR_KEYWORD: "variadic keyword parameter",
    Parameter.KEYWORD_ONLY: "keyword-only parameter",
}


class SignatureExtractor:
    """Extract ordered dependency names from user-supplied callables.

    Subclass and pass an instance as ``Container(signature_extractor=...)`` to
    change how names are derived, for example to strip a naming prefix.
    """

    def extract(self, provider: Callable[..., Any]) -> tuple[str, ...]:
        """Return the declared parameter names of ``provider`` in order.

        Args:
            provider: Class, function, bound method, or other callable whose
                parameters name its dependencies.

        Raises:
            TagwireSignatureParseError: If the callable has no retrievable
                signature or declares parameters that cannot be wired by tag.

        """
        parameters = self._provider_parameters(provider)
        names: list[str] = []
        for parameter in parameters:
            if parameter.kind not in _WIRABLE_PARAMETER_KINDS:
                description = _PARAMETER_KIND_DESCRIPTIONS[parameter.kind]
                raise TagwireSignatureParseError(
                    provider,
                    self._source_text(provider),
                    f"{description} '{parameter.name}' cannot be resolved by tag",
                )
            names.append(parameter.name)
        return tuple(names)

    def _provider_parameters(self, provider: Callable[..., Any]) -> tuple[Parameter, ...]:
        if not callable(provider):
            raise TagwireSignatureParseError(
                provider,
                self._source_text(provider),
                "object is not callable",
            )
        try:
            signature = inspect.signature(provider)
        except (ValueError, TypeError) as error:
            raise TagwireSignatureParseError(
                provider,
                self._source_text(provider),
                f"no signature available ({error})",
            ) from error
        return tuple(signature.parameters.values())

    def _source_text(self, provider: Any) -> str:
        try:
            return inspect.getsource(provider)
        except (OSError, TypeError):
            return repr(provider)


_default_extractor = SignatureExtractor()


def extract_dependency_names(provider: Callable[..., Any]) -> tuple[str, ...]:
    """Return the dependency names of ``provider`` using the default extractor.

    Args:
        provider: Callable whose formal parameter names should be returned.

    Examples:
        .. code-block:: python

            def make_client(settings, logger): ...

            assert extract_dependency_names(make_client) == ("settings", "logger")

    """
    return _default_extractor.extract(provider)
