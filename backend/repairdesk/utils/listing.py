from __future__ import annotations
from typing import Iterable, List, Sequence, Tuple, TypeVar
from flask import request, abort, make_response
from repairdesk.config.pagination import normalize_pagination
import hashlib
import json

T = TypeVar('T')

def apply_pagination(items: Sequence[T]) -> Tuple[List[T], int, int, int]:
    try:
        limit, offset = normalize_pagination(request.args.get('limit'), request.args.get('offset'))
    except ValueError as e:
        abort(400, description=str(e))
    total = len(items)
    return list(items[offset:offset + limit]), total, limit, offset

def content_digest(rows: list) -> str:
    """Stable hash of the serialized rows, so any field change alters the ETag."""
    blob = json.dumps(rows, sort_keys=True, separators=(',', ':'), ensure_ascii=False, default=str)
    return hashlib.sha256(blob.encode()).hexdigest()

def compute_etag(ids: Iterable[str], total: int, limit: int, offset: int, version: str = '') -> str:
    seed = f"{list(ids)}|{total}|{limit}|{offset}|{version or ''}"
    return hashlib.sha256(seed.encode()).hexdigest()[:32]

def build_list_payload(rows: list, total: int, limit: int, offset: int):
    return {
        'data': rows,
        'pagination': {
            'total': total,
            'limit': limit,
            'offset': offset,
            'returned': len(rows)
        }
    }

def make_list_response(rows: list, total: int, limit: int, offset: int):
    """JSON list envelope with an ETag; answers If-None-Match with 304.

    The ETag covers the page window and the full content of the returned rows
    (joined records included), so replacing a record under the same id
    invalidates it.
    """
    ids = [r.get('id') for r in rows]
    etag = compute_etag(ids, total, limit, offset, content_digest(rows))
    inm = request.headers.get('If-None-Match')
    if inm and inm.strip('"') == etag:
        resp = make_response('', 304)
    else:
        resp = make_response(build_list_payload(rows, total, limit, offset))
    resp.headers['ETag'] = etag
    return resp

__all__ = ['apply_pagination', 'content_digest', 'compute_etag', 'build_list_payload', 'make_list_response']
