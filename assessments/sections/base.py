"""
Building blocks for ESG section schemas.

A section schema describes the fields a sub-section accepts and which of them
count towards form completion. Fields are described with ``FieldSpec`` trees:
scalars and arrays are leaves, nested optional objects carry their own child
specs.
"""

from collections import namedtuple

SCALAR = "scalar"
ARRAY_NON_EMPTY = "arrayNonEmpty"
NESTED_OPTIONAL = "nestedOptional"

FIELD_KINDS = (SCALAR, ARRAY_NON_EMPTY, NESTED_OPTIONAL)

# Keys every stored sub-section carries regardless of its shape.
BOOKKEEPING_FIELDS = ("points", "remarks", "lastUpdated")


class FieldSpec(namedtuple("FieldSpec", ["path", "kind", "children", "required"])):
    """
    A single field of a sub-section.

    ``required`` marks the field as part of the completion checklist. Nested
    fields expose their leaves through ``leaves()``, each leaf being its own
    checklist entry.
    """
    __slots__ = ()

    def __new__(cls, path, kind=SCALAR, children=(), required=True):
        if kind not in FIELD_KINDS:
            raise ValueError(f"Unknown field kind '{kind}' for '{path}'")
        if kind == NESTED_OPTIONAL and not children:
            raise ValueError(f"Nested field '{path}' must declare its children")
        return super().__new__(cls, path, kind, tuple(children), required)

    def leaves(self):
        """Yield checklist leaves with their dotted paths."""
        if self.kind != NESTED_OPTIONAL:
            yield self
            return
        for child in self.children:
            child_spec = child._replace(path=f"{self.path}.{child.path}")
            yield from child_spec.leaves()


def scalar(path, required=True):
    return FieldSpec(path, SCALAR, required=required)


def array(path, required=True):
    return FieldSpec(path, ARRAY_NON_EMPTY, required=required)


def nested(path, *children, required=True):
    return FieldSpec(path, NESTED_OPTIONAL, children, required=required)


def _field_json_schema(spec):
    if spec.kind == ARRAY_NON_EMPTY:
        return {"type": ["array", "null"]}
    if spec.kind == NESTED_OPTIONAL:
        return {
            "type": ["object", "null"],
            "properties": {child.path: _field_json_schema(child) for child in spec.children},
        }
    return {}


class SectionSchema:
    """Field definition of one sub-section of an ESG category."""

    def __init__(self, name, title, fields, certificate_field="certificate"):
        self.name = name
        self.title = title
        self.fields = tuple(fields)
        self.certificate_field = certificate_field

        seen = set()
        for spec in self.fields:
            if spec.path in seen:
                raise ValueError(f"Duplicate field '{spec.path}' in section '{name}'")
            seen.add(spec.path)

    def __repr__(self):
        return f"<SectionSchema {self.name} ({len(self.fields)} fields)>"

    def field(self, path):
        for spec in self.fields:
            if spec.path == path:
                return spec
        return None

    def json_schema(self):
        """
        JSON schema of a patch for this section, used to validate request
        payloads. Scalars accept any value; arrays and nested objects must
        have the right container type (or be null).
        """
        return {
            "type": "object",
            "properties": {spec.path: _field_json_schema(spec) for spec in self.fields},
        }

    def checklist(self):
        """Ordered completion checklist, nested fields expanded to their leaves."""
        entries = []
        for spec in self.fields:
            if not spec.required:
                continue
            entries.extend(leaf for leaf in spec.leaves() if leaf.required)
        return tuple(entries)


def simple_section(name, title):
    """A sub-section holding a single ``{value, certificate}`` pair."""
    return SectionSchema(name, title, [
        scalar("value"),
        scalar("certificate"),
    ])
