def test_openapi_spec_available(client):
    resp = client.get('/openapi.json')
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['openapi'].startswith('3.')
    for path in ('/api/customers', '/api/technicians', '/api/devices', '/api/tickets',
                 '/api/tickets/{ticket_id}', '/api/data/export', '/api/data/import'):
        assert path in body['paths'], path


def test_docs_page(client):
    resp = client.get('/docs')
    assert resp.status_code == 200
    assert b'redoc' in resp.data


def test_ticket_status_enum_and_filters(client):
    spec = client.get('/openapi.json').get_json()
    assert spec['components']['schemas']['TicketStatus']['enum'] == [
        'New', 'Diagnosing', 'Awaiting Parts', 'In Progress', 'Ready', 'Picked Up', 'Cancelled',
    ]
    params = spec['paths']['/api/tickets']['get']['parameters']
    refs = [p['$ref'].rsplit('/', 1)[-1] for p in params]
    assert refs == ['LimitParam', 'OffsetParam', 'TicketStatusFilter', 'TicketSearch']


def test_operation_ids_unique(client):
    spec = client.get('/openapi.json').get_json()
    ids = [op['operationId'] for ops in spec['paths'].values() for op in ops.values()]
    assert len(ids) == len(set(ids))
    assert 'auto_patch_api_tickets_ticket_id' in ids
