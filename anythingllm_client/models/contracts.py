"""
Response contracts.

WHAT: Declared shape plus canonicalization rule for one operation's result
WHY: A payload that parses but violates the shape is a failure, not a success
HOW: pydantic TypeAdapter validation, optional transform, ordered alternatives
"""

from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from ..utils.exceptions import DomainError

T = TypeVar("T")


class ContractViolation(ValueError):
    """Raised by a transform when a valid payload cannot be canonicalized."""


def violations_from(exc: ValidationError) -> List[Dict[str, Any]]:
    """Flatten a pydantic ValidationError into JSON-safe violation records."""
    return [
        {
            "path": ".".join(str(part) for part in error.get("loc", ())),
            "message": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]


class ResponseContract(Generic[T]):
    """
    Validates a raw payload and converts it to the canonical type.

    Alternatives are tried in order; the first that validates wins. When
    none does, the violations of every alternative are reported.
    """

    def __init__(self, schema: Any, transform: Optional[Callable[[Any], T]] = None,
                 *, name: Optional[str] = None):
        self.schema = schema
        self.transform = transform
        self.name = name or getattr(schema, "__name__", repr(schema))
        self._adapter = TypeAdapter(schema)
        self._alternatives: List["ResponseContract"] = []

    # ---------- builders ----------

    @classmethod
    def enveloped(cls, schema: Any, key: str) -> "ResponseContract":
        """Accept `schema` bare or wrapped as {key: schema}."""
        bare = cls(schema)
        wrapper = cls(Dict[str, Any], transform=_unwrap(key, TypeAdapter(schema)),
                      name=f"{{{key}: {bare.name}}}")
        return bare.or_(wrapper)

    def or_(self, other: "ResponseContract") -> "ResponseContract":
        """Return a contract trying self first, then `other`."""
        combined = ResponseContract(self.schema, self.transform, name=f"{self.name} | {other.name}")
        combined._alternatives = [self, other]
        return combined

    # ---------- validation ----------

    def parse(self, payload: Any) -> T:
        """
        Validate `payload` and return the canonical value.

        Raises:
            DomainError: ValidationFailure with the violation list and raw payload
        """
        violations = self._collect(payload)
        if isinstance(violations, _Parsed):
            return violations.value
        raise DomainError.validation_failure(
            "Client schema mismatch with server response",
            status=None,
            details={"contract": self.name, "errors": violations, "data": _safe_payload(payload)},
        )

    def _collect(self, payload: Any):
        if self._alternatives:
            collected: List[Dict[str, Any]] = []
            for alternative in self._alternatives:
                result = alternative._collect(payload)
                if isinstance(result, _Parsed):
                    return result
                collected.extend(result)
            return collected

        try:
            value = self._adapter.validate_python(payload)
        except ValidationError as e:
            return violations_from(e)

        if self.transform is None:
            return _Parsed(value)
        try:
            return _Parsed(self.transform(value))
        except ValidationError as e:
            return violations_from(e)
        except ContractViolation as e:
            return [{"path": "", "message": str(e), "type": "contract_violation"}]


class _Parsed:
    __slots__ = ("value",)

    def __init__(self, value):
        self.value = value


def _unwrap(key: str, adapter: TypeAdapter) -> Callable[[Dict[str, Any]], Any]:
    def unwrap(envelope: Dict[str, Any]) -> Any:
        if key not in envelope:
            raise ContractViolation(f"missing envelope key '{key}'")
        return adapter.validate_python(envelope[key])
    return unwrap


def _safe_payload(payload: Any) -> Any:
    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json")
    return payload


def list_of(schema: Any, *, envelope: Optional[str] = None) -> ResponseContract:
    """Contract for a JSON array of `schema`, optionally also accepted under `envelope`."""
    if envelope:
        return ResponseContract.enveloped(List[schema], envelope)
    return ResponseContract(List[schema])


def field_of(*path: str) -> Callable[[Any], Any]:
    """Transform that walks attribute `path` on a validated model."""
    def extract(value: Any) -> Any:
        for part in path:
            value = getattr(value, part)
        return value
    return extract
