"""Minimal deterministic OpenAPI spec builder.

Scope (purposefully narrow):
- For each record collection: list + create; tickets also get single GET/PATCH/DELETE
- Data import/export endpoints
- Reusable params: limit, offset; ticket filters status and q

Served by `create_app` at `/openapi.json`.
"""
from typing import Any, Dict, List, Tuple
from .models.entities import ALL_STATUSES, STATUS_FILTER_ALL

__all__ = ["build_openapi_spec"]

# Entity registry: (SchemaName, collection path, required fields)
ENTITIES: List[Tuple[str, str, List[str]]] = [
    ("Customer", "customers", ["id", "name"]),
    ("Technician", "technicians", ["id", "name"]),
    ("Device", "devices", ["id", "type"]),
    ("Ticket", "tickets", ["id", "createdAt", "updatedAt", "customerId", "deviceId", "problemDescription", "status"]),
]

_STRING = {"type": "string"}

PROPERTIES: Dict[str, Dict[str, Any]] = {
    "Customer": {"id": _STRING, "name": _STRING, "phone": _STRING, "email": _STRING},
    "Technician": {"id": _STRING, "name": _STRING},
    "Device": {"id": _STRING, "type": _STRING, "brand": _STRING, "model": _STRING, "serial": _STRING},
    "Ticket": {
        "id": _STRING,
        "createdAt": {"type": "string", "format": "date-time"},
        "updatedAt": {"type": "string", "format": "date-time"},
        "customerId": _STRING,
        "deviceId": _STRING,
        "problemDescription": _STRING,
        "status": {"$ref": "#/components/schemas/TicketStatus"},
        "technicianId": _STRING,
        "estimatedCost": {"type": "number", "minimum": 0},
        "notes": _STRING,
    },
}


def _ref(name: str) -> Dict[str, Any]:
    return {"$ref": f"#/components/schemas/{name}"}


def _json(schema: Dict[str, Any]) -> Dict[str, Any]:
    return {"application/json": {"schema": schema}}


def _list_op(schema_name: str, coll: str, extra_params: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "summary": f"List {coll}",
        "parameters": [
            {"$ref": "#/components/parameters/LimitParam"},
            {"$ref": "#/components/parameters/OffsetParam"},
            *extra_params,
        ],
        "responses": {
            "200": {
                "description": "OK",
                "headers": {"ETag": {"schema": _STRING}},
                "content": _json({
                    "type": "object",
                    "properties": {
                        "data": {"type": "array", "items": _ref(schema_name)},
                        "pagination": _ref("Pagination"),
                    },
                }),
            },
            "304": {"description": "Not Modified"},
            "400": {"$ref": "#/components/responses/BadRequest"},
        },
    }


def _create_op(schema_name: str) -> Dict[str, Any]:
    return {
        "summary": f"Create {schema_name.lower()}",
        "requestBody": {"required": True, "content": _json(_ref(schema_name))},
        "responses": {
            "201": {"description": "Created", "content": _json(_ref(schema_name))},
            "400": {"$ref": "#/components/responses/BadRequest"},
        },
    }


def build_openapi_spec() -> Dict[str, Any]:
    schemas: Dict[str, Any] = {
        name: {"type": "object", "properties": PROPERTIES[name], "required": required}
        for name, _, required in ENTITIES
    }
    # No transition graph: any status may follow any other
    schemas["TicketStatus"] = {"type": "string", "enum": list(ALL_STATUSES)}
    schemas["RepairData"] = {
        "type": "object",
        "properties": {coll: {"type": "array", "items": _ref(name)} for name, coll, _ in ENTITIES},
    }
    schemas["Pagination"] = {
        "type": "object",
        "properties": {
            "total": {"type": "integer"},
            "limit": {"type": "integer"},
            "offset": {"type": "integer"},
            "returned": {"type": "integer"},
        },
        "required": ["total", "limit", "offset", "returned"],
    }
    schemas["Error"] = {
        "type": "object",
        "properties": {"error": {"type": "object", "properties": {
            "status": {"type": "integer"}, "title": _STRING, "detail": _STRING,
        }}},
        "required": ["error"],
    }

    components: Dict[str, Any] = {
        "schemas": schemas,
        "responses": {
            "NotFound": {"description": "Not Found", "content": _json(_ref("Error"))},
            "BadRequest": {"description": "Bad Request", "content": _json(_ref("Error"))},
        },
        "parameters": {
            "LimitParam": {"name": "limit", "in": "query", "schema": {"type": "integer", "default": 50}},
            "OffsetParam": {"name": "offset", "in": "query", "schema": {"type": "integer", "default": 0}},
            "TicketStatusFilter": {
                "name": "status", "in": "query",
                "schema": {"type": "string", "enum": [STATUS_FILTER_ALL, *ALL_STATUSES], "default": STATUS_FILTER_ALL},
            },
            "TicketSearch": {
                "name": "q", "in": "query", "schema": _STRING,
                "description": "Case-insensitive substring over description, customer, device and technician fields",
            },
            "TicketId": {"name": "ticket_id", "in": "path", "required": True, "schema": _STRING},
        },
    }

    paths: Dict[str, Any] = {}
    for schema_name, coll, _ in ENTITIES:
        extra = []
        if schema_name == "Ticket":
            extra = [{"$ref": "#/components/parameters/TicketStatusFilter"}, {"$ref": "#/components/parameters/TicketSearch"}]
        paths[f"/api/{coll}"] = {"get": _list_op(schema_name, coll, extra), "post": _create_op(schema_name)}

    id_param = [{"$ref": "#/components/parameters/TicketId"}]
    not_found = {"$ref": "#/components/responses/NotFound"}
    paths["/api/tickets/{ticket_id}"] = {
        "get": {"summary": "Get ticket", "parameters": id_param,
                "responses": {"200": {"description": "OK", "content": _json(_ref("Ticket"))}, "404": not_found}},
        "patch": {"summary": "Update ticket fields", "parameters": id_param,
                  "requestBody": {"required": True, "content": _json({"type": "object"})},
                  "responses": {"200": {"description": "OK", "content": _json(_ref("Ticket"))},
                                "400": {"$ref": "#/components/responses/BadRequest"}, "404": not_found}},
        "delete": {"summary": "Delete ticket (idempotent)", "parameters": id_param,
                   "responses": {"204": {"description": "Deleted"}}},
    }
    paths["/api/data/export"] = {
        "get": {"summary": "Export all data", "responses": {"200": {
            "description": "JSON download",
            "headers": {"Content-Disposition": {"schema": _STRING}},
            "content": _json(_ref("RepairData")),
        }}},
    }
    paths["/api/data/import"] = {
        "post": {"summary": "Replace all data", "requestBody": {"required": True, "content": _json(_ref("RepairData"))},
                 "responses": {"200": {"description": "Imported"}, "400": {"$ref": "#/components/responses/BadRequest"}}},
    }

    # Add operationIds & tags
    tag_desc: Dict[str, str] = {}
    for path, ops in paths.items():
        tag = path.split("/")[2].capitalize()
        for method, od in ops.items():
            rid = path.strip("/").replace("/", "_").replace("{", "").replace("}", "")
            od["operationId"] = f"auto_{method}_{rid}"
            od["tags"] = [tag]
        tag_desc[tag] = f"{tag} endpoints"

    return {
        "openapi": "3.0.3",
        "info": {"title": "Repair Desk API", "version": "0.1.0"},
        "paths": paths,
        "components": components,
        "tags": [{"name": n, "description": d} for n, d in sorted(tag_desc.items())],
    }
