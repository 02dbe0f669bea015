"""
Description:
Describes a pydantic model as a flat field guide for the prompt:
field name -> {type, description, required}, where type is one of
integer, text, list-of-text or object.

Providers that only support JSON mode never see the JSON schema itself, so
the field guide is what tells the model which keys to produce.

Dependencies:
- pydantic: For the model JSON schema.
"""
import json
from typing import Any, Dict, Type

from pydantic import BaseModel

FieldGuide = Dict[str, Dict[str, Any]]


def _resolve(prop: Dict[str, Any], defs: Dict[str, Any]) -> Dict[str, Any]:
    if "$ref" in prop:
        return defs.get(prop["$ref"].split("/")[-1], {})
    if len(prop.get("allOf", [])) == 1:
        return _resolve(prop["allOf"][0], defs)
    # Optional[X] renders as anyOf [X, null]
    if "anyOf" in prop:
        for option in prop["anyOf"]:
            if option.get("type") != "null":
                return _resolve(option, defs)
    return prop


def _field_type(prop: Dict[str, Any]) -> str:
    json_type = prop.get("type")
    if json_type == "integer":
        return "integer"
    if json_type == "array":
        return "list-of-text"
    if json_type == "object" or "properties" in prop:
        return "object"
    return "text"


def describe_response_schema(model: Type[BaseModel]) -> FieldGuide:
    schema = model.model_json_schema()
    defs = schema.get("$defs", {})
    required = set(schema.get("required", []))

    guide: FieldGuide = {}
    for name, raw_prop in schema.get("properties", {}).items():
        prop = _resolve(raw_prop, defs)
        entry = {
            "type": _field_type(prop),
            "description": raw_prop.get("description") or prop.get("description", ""),
            "required": name in required,
        }
        if entry["type"] == "object":
            nested_required = set(prop.get("required", []))
            entry["fields"] = {
                child: {
                    "type": _field_type(_resolve(child_prop, defs)),
                    "description": child_prop.get("description", ""),
                    "required": child in nested_required,
                }
                for child, child_prop in prop.get("properties", {}).items()
            }
        guide[name] = entry
    return guide


def render_field_guide(model: Type[BaseModel]) -> str:
    """JSON text of describe_response_schema, for embedding in a system message."""
    return json.dumps(describe_response_schema(model), indent=2)
