"""JSON and XML serialization for plate data."""
import logging
import xml.etree.ElementTree as ET
from typing import Dict, List, Type, Union, get_args, get_origin

from pydantic import BaseModel, ValidationError

from plateset.models import (
    Plate,
    PlateDocument,
    ResultDocument,
    SimpleWellDocument,
    Stack,
    StackDocument,
    Well,
    WellSet,
    WellSetDocument,
)

logger = logging.getLogger(__name__)


class WellsEnvelope(BaseModel):
    wells: List[SimpleWellDocument] = []


class WellSetsEnvelope(BaseModel):
    wellsets: List[WellSetDocument] = []


class PlatesEnvelope(BaseModel):
    plates: List[PlateDocument] = []


class StacksEnvelope(BaseModel):
    stacks: List[StackDocument] = []


class ResultsEnvelope(BaseModel):
    results: List[ResultDocument] = []


# Root tag -> envelope model
ENVELOPES: Dict[str, Type[BaseModel]] = {
    "wells": WellsEnvelope,
    "wellsets": WellSetsEnvelope,
    "plates": PlatesEnvelope,
    "stacks": StacksEnvelope,
    "results": ResultsEnvelope,
}

# List field -> tag of each item in XML
ITEM_TAGS = {
    "wells": "well",
    "wellsets": "wellset",
    "plates": "plate",
    "stacks": "stack",
    "results": "result",
    "groups": "group",
    "data": "value",
}

Serializable = Union[Well, WellSet, Plate, Stack, ResultDocument]


class SerializationService:
    """
    Convert wells, well sets, plates, stacks and results to and from JSON
    and XML.

    Both formats wrap their content in a list envelope keyed by kind
    (``wells``, ``wellsets``, ``plates``, ``stacks``, ``results``), so a
    single object and a list share one format. Readers always return a list.
    """

    def _envelope(self, items: Union[Serializable, List[Serializable]]) -> BaseModel:
        if not isinstance(items, list):
            items = [items]
        if not items:
            raise ValueError("Nothing to serialize.")
        kind = type(items[0])
        if any(type(item) is not kind for item in items):
            raise TypeError("Cannot serialize a mixed list.")
        if kind is Well:
            return WellsEnvelope(wells=[SimpleWellDocument.from_well(item) for item in items])
        if kind is WellSet:
            return WellSetsEnvelope(wellsets=[WellSetDocument.from_well_set(item) for item in items])
        if kind is Plate:
            return PlatesEnvelope(plates=[PlateDocument.from_plate(item) for item in items])
        if kind is Stack:
            return StacksEnvelope(stacks=[StackDocument.from_stack(item) for item in items])
        if kind is ResultDocument:
            return ResultsEnvelope(results=items)
        raise TypeError(f"Cannot serialize {kind.__name__}")

    @staticmethod
    def _unwrap(envelope: BaseModel) -> list:
        if isinstance(envelope, WellsEnvelope):
            return [document.to_well() for document in envelope.wells]
        if isinstance(envelope, WellSetsEnvelope):
            return [document.to_well_set() for document in envelope.wellsets]
        if isinstance(envelope, PlatesEnvelope):
            return [document.to_plate() for document in envelope.plates]
        if isinstance(envelope, StacksEnvelope):
            return [document.to_stack() for document in envelope.stacks]
        return list(envelope.results)

    # JSON

    def to_json(self, items: Union[Serializable, List[Serializable]], indent: int = 2) -> str:
        return self._envelope(items).model_dump_json(indent=indent)

    def from_json(self, text: Union[str, bytes]) -> list:
        """
        Read a JSON document written by ``to_json``.

        Raises:
            ValueError: If the document is malformed or describes invalid data
        """
        for envelope_cls in ENVELOPES.values():
            key = next(iter(envelope_cls.model_fields))
            try:
                envelope = envelope_cls.model_validate_json(text, strict=False)
            except ValidationError as e:
                logger.debug(f"Not a {key} document: {e}")
                continue
            if key in envelope.model_fields_set:
                return self._unwrap(envelope)
        raise ValueError("Unrecognized JSON document.")

    # XML

    def to_xml(self, items: Union[Serializable, List[Serializable]]) -> str:
        envelope = self._envelope(items)
        root = self._to_element("envelope", envelope)[0]
        ET.indent(root)
        return ET.tostring(root, encoding="utf-8", xml_declaration=True).decode("utf-8")

    def from_xml(self, text: Union[str, bytes]) -> list:
        """
        Read an XML document written by ``to_xml``.

        Raises:
            ValueError: If the document is malformed or describes invalid data
        """
        try:
            root = ET.fromstring(text)
        except ET.ParseError as e:
            raise ValueError(f"Invalid XML: {e}")
        if root.tag not in ENVELOPES:
            raise ValueError(f"Unrecognized XML root element: {root.tag}")
        container = ET.Element("envelope")
        container.append(root)
        try:
            envelope = self._from_element(container, ENVELOPES[root.tag])
        except ValidationError as e:
            raise ValueError(f"Invalid XML content: {e}")
        return self._unwrap(envelope)

    def _to_element(self, tag: str, model: BaseModel) -> ET.Element:
        element = ET.Element(tag)
        for name in type(model).model_fields:
            value = getattr(model, name)
            if value is None:
                continue
            child = ET.SubElement(element, name)
            if isinstance(value, list):
                item_tag = ITEM_TAGS.get(name, "item")
                for item in value:
                    if isinstance(item, BaseModel):
                        child.append(self._to_element(item_tag, item))
                    else:
                        ET.SubElement(child, item_tag).text = str(item)
            else:
                child.text = str(value)
        return element

    def _from_element(self, element: ET.Element, model_cls: Type[BaseModel]) -> BaseModel:
        fields = {}
        for name, info in model_cls.model_fields.items():
            child = element.find(name)
            if child is None:
                continue
            if get_origin(info.annotation) in (list, List):
                item_type = get_args(info.annotation)[0]
                if isinstance(item_type, type) and issubclass(item_type, BaseModel):
                    fields[name] = [self._from_element(item, item_type) for item in child]
                else:
                    fields[name] = [item.text for item in child]
            else:
                # An empty element is an empty string; absent fields are never written
                fields[name] = child.text if child.text is not None else ""
        return model_cls.model_validate(fields)
