"""
Resourceful — Document Codec
=============================

What:  Converts between wire documents (JSON objects) and typed records of one
       resource's pydantic record type.
Why:   Handlers stay generic: they never know which fields a resource has.
How:   One DocumentCodec per registered resource. At construction it reads
       the record type's declared fields once and builds a two-way table of
       Python field name ↔ wire key using the API's naming strategy. Decoding
       merges the present keys onto a target record and lets pydantic
       validate the result; encoding dumps records in JSON mode and renames
       the keys.

Accepted request documents (all normalize to a list of objects):
    {"data": {...}}            single object, enveloped
    {"data": [{...}, ...]}     list of objects, enveloped
    {"posts": {...}}           envelope keyed by the resource name
    {"title": "hi"}            bare object of field values

    An envelope key is only recognised when it is not itself a field of
    the record type. Non-field members next to it ({"data": {...}, "meta": {}})
    are ignored; field values next to it are rejected.

Produced documents:
    one record      → {"data": {...}}
    a sequence      → {"data": [{...}, ...]}   (even of length one)

Partial merge:
    decode_one(doc, target=stored) keeps every field of `stored` that the
    document does not mention. Without a target the merge starts from
    zero_value(): declared defaults first, then type zero values.
    The id of `stored` is pinned: the document may repeat it, not change it.
"""

import json
import logging
from enum import Enum
from types import UnionType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Type, Union, get_args, get_origin

from pydantic import BaseModel, ValidationError
from pydantic.fields import FieldInfo

from resourceful.exceptions import (
    CardinalityError,
    DecodeError,
    IDMismatchError,
    MalformedBodyError,
    ResourceConfigurationError,
)
from resourceful.naming import NamingStrategy
from resourceful.schemas import ErrorObject

logger = logging.getLogger(__name__)

ENVELOPE_KEY = "data"

_CONTAINER_ZEROS = {
    list: list,
    dict: dict,
    set: set,
    frozenset: frozenset,
    tuple: tuple,
}


def zero_for_annotation(annotation: Any) -> Any:
    """
    Zero value for a type annotation.

    str → "", int → 0, float → 0.0, bool → False, containers → empty,
    Optional[...] → None, nested models → their own zero value.
    Types without a natural zero (datetime, UUID, enums, ...) give None,
    so the field has to be supplied by the document.
    """
    origin = get_origin(annotation)
    if origin is Union or origin is UnionType:
        args = get_args(annotation)
        if type(None) in args:
            return None
        return zero_for_annotation(args[0])
    if origin is not None:
        factory = _CONTAINER_ZEROS.get(origin)
        return factory() if factory else None

    if not isinstance(annotation, type):
        return None
    if issubclass(annotation, BaseModel):
        return zero_record(annotation)
    if issubclass(annotation, Enum):
        return None
    if annotation in (str, int, float, bool, bytes):
        return annotation()
    factory = _CONTAINER_ZEROS.get(annotation)
    return factory() if factory else None


def _zero_for_field(info: FieldInfo) -> Any:
    if not info.is_required():
        return info.get_default(call_default_factory=True)
    return zero_for_annotation(info.annotation)


def zero_record(record_type: Type[BaseModel]) -> BaseModel:
    """An unvalidated instance of `record_type` with every field at its zero value."""
    values = {name: _zero_for_field(info) for name, info in record_type.model_fields.items()}
    return record_type.model_construct(**values)


class DocumentCodec:
    """
    Wire codec specialized to one record type.

    Args:
        record_type:    pydantic model class of the resource
        resource_name:  pluralized resource name (also accepted as envelope key)
        naming:         strategy giving the wire key of each field
        id_field:       field holding the record id; a partial merge never changes it

    Raises:
        ResourceConfigurationError: two fields would share one wire key
    """

    def __init__(
        self,
        record_type: Type[BaseModel],
        resource_name: str,
        naming: NamingStrategy,
        id_field: Optional[str] = "id",
    ):
        self.record_type = record_type
        self.resource_name = resource_name
        # Pinned on partial merges; record types without the field are not pinned
        self.id_field = id_field if id_field in record_type.model_fields else None

        self._field_to_wire: Dict[str, str] = {}
        self._wire_to_field: Dict[str, str] = {}
        for field_name in record_type.model_fields:
            wire = naming.wire_name(field_name)
            if wire in self._wire_to_field:
                raise ResourceConfigurationError(
                    f"{record_type.__name__}: fields '{self._wire_to_field[wire]}' and "
                    f"'{field_name}' both map to wire key '{wire}'"
                )
            self._field_to_wire[field_name] = wire
            self._wire_to_field[wire] = field_name

        # Decode also accepts the Python field names; wire keys win on overlap
        self._accepted: Dict[str, str] = dict(self._wire_to_field)
        for field_name in record_type.model_fields:
            self._accepted.setdefault(field_name, field_name)

        self._envelope_keys = {ENVELOPE_KEY, resource_name} - set(self._accepted)

    # ── Field names ───────────────────────────────────────────────────────

    def wire_name(self, field_name: str) -> str:
        return self._field_to_wire[field_name]

    def field_name(self, wire_key: str) -> Optional[str]:
        return self._accepted.get(wire_key)

    # ── Decoding ──────────────────────────────────────────────────────────

    def zero_value(self) -> BaseModel:
        return zero_record(self.record_type)

    def objects(self, document: Any) -> List[Mapping[str, Any]]:
        """
        Normalize any accepted document shape into a list of field mappings.

        When an envelope key is present its value is the payload. Other
        top-level keys that are not record fields ("meta", "links", ...) are
        ignored; a record field next to an envelope is ambiguous and rejected.
        """
        if not isinstance(document, Mapping):
            raise MalformedBodyError()

        envelopes = [key for key in document if key in self._envelope_keys]
        if not envelopes:
            return [document]
        if len(envelopes) > 1:
            raise MalformedBodyError(
                f"Document has more than one envelope: {', '.join(sorted(envelopes))}"
            )

        key = envelopes[0]
        stray_fields = [other for other in document if other in self._accepted]
        if stray_fields:
            raise MalformedBodyError(
                f"Field values must be inside '{key}', found {', '.join(stray_fields)} next to it"
            )
        for other in document:
            if other != key:
                logger.debug("Ignoring top-level member '%s' of %s document", other, self.resource_name)

        value = document[key]
        if value is None:
            return []
        if isinstance(value, Mapping):
            return [value]
        if isinstance(value, list):
            if not all(isinstance(item, Mapping) for item in value):
                raise MalformedBodyError(f"Every item of '{key}' must be a JSON object")
            return value
        raise MalformedBodyError(f"'{key}' must be a JSON object or a list of objects")

    def decode(
        self,
        document: Any,
        targets: Optional[Sequence[BaseModel]] = None,
    ) -> List[BaseModel]:
        """
        Decode every object of `document`.

        Object i is merged onto targets[i] when given, else onto a zero value.
        A merged record keeps the id of its target.
        """
        objects = self.objects(document)
        targets = list(targets or [])
        records = []
        for index, obj in enumerate(objects):
            pointer = f"/{ENVELOPE_KEY}/{index}" if len(objects) > 1 else f"/{ENVELOPE_KEY}"
            if index < len(targets):
                record = self.merge(obj, targets[index], pointer)
                self._check_identity(record, targets[index], pointer)
            else:
                record = self.merge(obj, self.zero_value(), pointer)
            records.append(record)
        return records

    def decode_one(self, document: Any, target: Optional[BaseModel] = None) -> BaseModel:
        """
        Decode a document that must describe exactly one object.

        With a `target` (a stored record) the document may repeat the target's
        id but never change it.

        Raises:
            CardinalityError: zero or several objects
            DecodeError:      a value does not fit its field
            IDMismatchError:  the document names a different id than `target`
        """
        objects = self.objects(document)
        if len(objects) != 1:
            raise CardinalityError(len(objects), context={"resource": self.resource_name})
        if target is None:
            return self.merge(objects[0], self.zero_value(), f"/{ENVELOPE_KEY}")
        record = self.merge(objects[0], target, f"/{ENVELOPE_KEY}")
        self._check_identity(record, target, f"/{ENVELOPE_KEY}")
        return record

    def merge(self, obj: Mapping[str, Any], target: Any, pointer: str = "") -> BaseModel:
        """Overwrite only the fields present in `obj`; everything else keeps the target's value."""
        present: Dict[str, Any] = {}
        for key, value in obj.items():
            field_name = self._accepted.get(key)
            if field_name is None:
                logger.debug("Ignoring unknown field '%s' for %s", key, self.resource_name)
                continue
            present[field_name] = value

        values = self._field_values(target)
        values.update(present)
        try:
            return self.record_type.model_validate(values)
        except ValidationError as exc:
            raise self._decode_error(exc, pointer) from exc

    def _field_values(self, target: Any) -> Dict[str, Any]:
        if isinstance(target, Mapping):
            return {name: target[name] for name in self.record_type.model_fields if name in target}
        return {name: getattr(target, name) for name in self.record_type.model_fields if hasattr(target, name)}

    def _check_identity(self, record: BaseModel, target: Any, pointer: str) -> None:
        if self.id_field is None:
            return
        values = self._field_values(target)
        if self.id_field not in values:
            return
        stored = values[self.id_field]
        sent = getattr(record, self.id_field)
        if str(sent) == str(stored):
            return
        wire = self._field_to_wire[self.id_field]
        raise IDMismatchError(
            expected=str(stored),
            received=str(sent),
            pointer=f"{pointer}/{wire}",
            context={"resource": self.resource_name},
        )

    def _decode_error(self, exc: ValidationError, pointer: str) -> DecodeError:
        errors = []
        first_field = None
        first_detail = None
        for err in exc.errors():
            loc = err.get("loc") or ()
            wire = self._field_to_wire.get(loc[0], str(loc[0])) if loc else ""
            path = "/".join([wire] + [str(part) for part in loc[1:]])
            if first_field is None:
                first_field, first_detail = wire, err.get("msg", "")
            errors.append(
                ErrorObject(
                    status="400",
                    code="decode_error",
                    title="Invalid field value",
                    detail=err.get("msg"),
                    source={"pointer": f"{pointer}/{path}" if path else pointer or "/"},
                )
            )
        return DecodeError(
            field=first_field or "",
            detail=first_detail or str(exc),
            errors=errors,
            context={"resource": self.resource_name},
        )

    # ── Encoding ──────────────────────────────────────────────────────────

    def to_wire(self, record: Any) -> Dict[str, Any]:
        """One record → JSON-ready mapping with wire keys."""
        if not isinstance(record, BaseModel):
            record = self.record_type.model_validate(record)
        dumped = record.model_dump(mode="json")
        return {self._field_to_wire.get(key, key): value for key, value in dumped.items()}

    def document(self, value: Any) -> Dict[str, Any]:
        """
        Build the response document.

        The shape follows the value, never its length: a model or mapping is
        a single record, anything else iterable is a collection.
        """
        if isinstance(value, (BaseModel, Mapping)):
            return {ENVELOPE_KEY: self.to_wire(value)}
        if isinstance(value, (str, bytes)) or not hasattr(value, "__iter__"):
            raise TypeError(f"Cannot encode {type(value).__name__} as a {self.resource_name} document")
        return {ENVELOPE_KEY: [self.to_wire(record) for record in value]}

    def encode(self, value: Any) -> bytes:
        return json.dumps(self.document(value)).encode("utf-8")
