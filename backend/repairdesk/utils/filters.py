from __future__ import annotations
from typing import Any, Dict, Mapping
from flask import abort

def parse_filters(specs: Dict[str, Dict[str, Any]], params: Mapping[str, Any]) -> Dict[str, Any]:
    """Generic query-parameter parser.

    specs: { param_name: { 'default': value, 'coerce': type/func, 'validate': callable(optional) } }
    Returns {param_name: value} for every spec; blank or missing params take the default.
    """
    out: Dict[str, Any] = {}
    for name, meta in specs.items():
        val = params.get(name)
        if val is None or val == '':
            out[name] = meta.get('default')
            continue
        if 'coerce' in meta:
            try:
                val = meta['coerce'](val)
            except Exception:
                abort(400, description=f'{name} invalid')
        if 'validate' in meta and not meta['validate'](val):
            abort(400, description=f'{name} invalid')
        out[name] = val
    return out

__all__ = ['parse_filters']
