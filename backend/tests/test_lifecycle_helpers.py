"""Reusable test helpers for building customers, devices and tickets through the API.

Patterns unified:
 - Creation with 201 assertion and JSON body return.
 - Ticket creation with its customer and device in one call.
 - Update assertion on the PATCH endpoint.
"""
from __future__ import annotations
from typing import Dict, Optional


def create_resource_and_assert(client, url: str, payload: dict, expected_status_field: str = 'status', expected_initial_status: str = None):
    resp = client.post(url, json=payload)
    assert resp.status_code == 201, resp.get_json()
    body = resp.get_json()
    if expected_initial_status:
        assert body[expected_status_field] == expected_initial_status
    return body


def create_ticket_with_refs(client, customer: Optional[Dict] = None, device: Optional[Dict] = None, **ticket_fields):
    c = create_resource_and_assert(client, '/api/customers', customer or {'name': 'John Doe', 'phone': '555-0100'})
    d = create_resource_and_assert(client, '/api/devices', device or {'type': 'Laptop', 'brand': 'Dell', 'model': 'XPS 13'})
    payload = {'customerId': c['id'], 'deviceId': d['id'], 'problemDescription': "Won't boot"}
    payload.update(ticket_fields)
    t = create_resource_and_assert(client, '/api/tickets', payload)
    return c, d, t


def assert_update(client, ticket_id: str, payload: dict, expected_status: int = 200, expected_key: str = None, expected_value=None):
    resp = client.patch(f'/api/tickets/{ticket_id}', json=payload)
    assert resp.status_code == expected_status, resp.get_json()
    if expected_status < 400 and expected_key is not None:
        assert resp.get_json()[expected_key] == expected_value
    return resp

__all__ = ['create_resource_and_assert', 'create_ticket_with_refs', 'assert_update']
