from tagwire.binding import Binding
from tagwire.container import CONTAINER_TAG, Container
from tagwire.exceptions import (
    TagwireBindingSealedError,
    TagwireCircularDependencyError,
    TagwireError,
    TagwireInvalidArgumentError,
    TagwireRegistrationConflictError,
    TagwireSignatureParseError,
    TagwireUnresolvedDependencyError,
)
from tagwire.lock_mode import LockMode
from tagwire.requests import ByCallable, ByTag, ByValue, Request
from tagwire.signature import SignatureExtractor, extract_dependency_names

__all__ = [
    "Binding",
    "ByCallable",
    "ByTag",
    "ByValue",
    "CONTAINER_TAG",
    "Container",
    "LockMode",
    "Request",
    "SignatureExtractor",
    "TagwireBindingSealedError",
    "TagwireCircularDependencyError",
    "TagwireError",
    "TagwireInvalidArgumentError",
    "TagwireRegistrationConflictError",
    "TagwireSignatureParseError",
    "TagwireUnresolvedDependencyError",
    "extract_dependency_names",
]
