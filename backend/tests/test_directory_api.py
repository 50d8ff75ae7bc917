import json
import pytest
from test_lifecycle_helpers import create_resource_and_assert


def test_create_customer_drops_blank_optionals(client):
    c = create_resource_and_assert(client, '/api/customers', {'name': ' Ann ', 'phone': '', 'email': 'ann@example.com'})
    assert c['name'] == 'Ann'
    assert 'phone' not in c
    assert c['email'] == 'ann@example.com'


def test_create_ignores_client_id(client):
    c = create_resource_and_assert(client, '/api/customers', {'id': 'mine', 'name': 'Ann'})
    assert c['id'] != 'mine'


@pytest.mark.parametrize('url,payload,detail', [
    ('/api/customers', {'phone': '1'}, 'name required'),
    ('/api/technicians', {'name': ''}, 'name required'),
    ('/api/devices', {'brand': 'Dell'}, 'type required'),
])
def test_required_fields(client, url, payload, detail):
    resp = client.post(url, json=payload)
    assert resp.status_code == 400
    assert resp.get_json()['error']['detail'] == detail
    assert client.get(url).get_json()['data'] == []


def test_lists_are_newest_first(client):
    a = create_resource_and_assert(client, '/api/technicians', {'name': 'Alice'})
    b = create_resource_and_assert(client, '/api/technicians', {'name': 'Bob'})
    body = client.get('/api/technicians').get_json()
    assert [t['id'] for t in body['data']] == [b['id'], a['id']]
    assert body['pagination']['total'] == 2


def test_device_fields(client):
    d = create_resource_and_assert(client, '/api/devices', {'type': 'Tablet', 'brand': 'Apple', 'model': 'iPad', 'serial': 'S1'})
    listed = client.get('/api/devices?limit=1').get_json()
    assert listed['data'] == [d]
    assert listed['pagination']['limit'] == 1


def test_list_etag(client):
    create_resource_and_assert(client, '/api/customers', {'name': 'Ann'})
    etag = client.get('/api/customers').headers['ETag']
    assert client.get('/api/customers', headers={'If-None-Match': f'"{etag}"'}).status_code == 304


def test_list_etag_changes_when_record_replaced_under_same_id(client):
    client.post('/api/data/import', data=json.dumps({'customers': [{'id': 'c1', 'name': 'Ann'}]}))
    etag = client.get('/api/customers').headers['ETag']
    client.post('/api/data/import', data=json.dumps({'customers': [{'id': 'c1', 'name': 'Bob'}]}))
    resp = client.get('/api/customers', headers={'If-None-Match': etag})
    assert resp.status_code == 200
    assert resp.get_json()['data'][0]['name'] == 'Bob'
    assert resp.headers['ETag'] != etag
