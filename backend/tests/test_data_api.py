import json
import re
from test_lifecycle_helpers import create_ticket_with_refs


def test_export_download(client):
    create_ticket_with_refs(client)
    resp = client.get('/api/data/export')
    assert resp.status_code == 200
    assert resp.mimetype == 'application/json'
    disposition = resp.headers['Content-Disposition']
    assert re.fullmatch(r'attachment; filename=repair-data-\d+\.json', disposition)
    body = json.loads(resp.get_data(as_text=True))
    assert set(body) == {'customers', 'technicians', 'devices', 'tickets'}
    assert len(body['tickets']) == 1
    assert resp.get_data(as_text=True).startswith('{\n  ')


def test_import_replaces_everything(client):
    create_ticket_with_refs(client)
    doc = {'customers': [{'id': 'c9', 'name': 'Zed'}]}
    resp = client.post('/api/data/import', data=json.dumps(doc), content_type='application/json')
    assert resp.status_code == 200
    assert resp.get_json() == {'customers': 1, 'technicians': 0, 'devices': 0, 'tickets': 0}
    assert client.get('/api/tickets').get_json()['data'] == []


def test_import_rejected_keeps_data(client):
    create_ticket_with_refs(client)
    before = client.get('/api/data/export').get_data(as_text=True)
    resp = client.post('/api/data/import', data='not json', content_type='application/json')
    assert resp.status_code == 400
    assert resp.get_json()['error']['detail'].startswith('Invalid JSON')
    assert client.get('/api/data/export').get_data(as_text=True) == before


def test_export_import_round_trip(client):
    create_ticket_with_refs(client, status='Awaiting Parts', estimatedCost=12.5, notes='order fan')
    exported = client.get('/api/data/export').get_data(as_text=True)
    assert client.post('/api/data/import', data=exported).status_code == 200
    assert client.get('/api/data/export').get_data(as_text=True) == exported
