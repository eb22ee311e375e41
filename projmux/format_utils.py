"""
Output format utilities for projmux CLI commands.

Provides functions to format data as debug reprs, JSON, YAML and CSV.
"""

import csv
import io
import json
from typing import Any, Dict, Iterable, Iterator, List, Optional

import yaml

OUTPUT_FORMATS = ('debug', 'json', 'json-raw', 'yaml', 'csv')

PROJECT_CSV_FIELDS = ['name', 'safe_name', 'path', 'remote', 'host', 'owner', 'tags']


def format_output(data: Iterable[Any], format: str,
                  fields: Optional[List[str]] = None) -> Iterator[str]:
    """
    Format data according to the specified format.

    Items with a to_dict() method are serialized through it; the debug
    format prints repr() of the items themselves.

    Args:
        data: Items to format
        format: Output format (debug, json, json-raw, yaml, csv)
        fields: Optional list of fields to include (for CSV)

    Yields:
        Formatted strings for output
    """
    if format == "debug":
        yield from format_debug(data)
    elif format == "json":
        yield from format_json(_to_dicts(data))
    elif format == "json-raw":
        yield from format_json_raw(_to_dicts(data))
    elif format == "yaml":
        yield from format_yaml(_to_dicts(data))
    elif format == "csv":
        yield from format_csv(_to_dicts(data), fields)
    else:
        raise ValueError(f"Unknown format: {format}")


def _to_dicts(data: Iterable[Any]) -> Iterator[Dict[str, Any]]:
    for item in data:
        yield item.to_dict() if hasattr(item, 'to_dict') else item


def format_debug(data: Iterable[Any]) -> Iterator[str]:
    """One repr() per item."""
    for item in data:
        yield repr(item)


def format_json(data: Iterator[Dict[str, Any]]) -> Iterator[str]:
    """Format data as a single indented JSON array."""
    all_data = list(data)
    yield json.dumps(all_data, ensure_ascii=False, indent=2)


def format_json_raw(data: Iterator[Dict[str, Any]]) -> Iterator[str]:
    """Format data as a compact single-line JSON array."""
    all_data = list(data)
    yield json.dumps(all_data, ensure_ascii=False, separators=(',', ':'))


def format_yaml(data: Iterator[Dict[str, Any]]) -> Iterator[str]:
    """Format data as YAML."""
    all_data = list(data)
    yield yaml.safe_dump(all_data, default_flow_style=False, allow_unicode=True, sort_keys=False).rstrip('\n')


def format_csv(data: Iterator[Dict[str, Any]], fields: Optional[List[str]] = None) -> Iterator[str]:
    """
    Format data as CSV.

    Args:
        data: Iterator of dictionaries
        fields: Optional list of fields to include. If None, uses all fields
            of the flattened items, sorted.
    """
    data_list = [flatten_dict(item) for item in data]
    if not data_list:
        return

    if fields is None:
        all_fields: set = set()
        for item in data_list:
            all_fields.update(item.keys())
        fields = sorted(all_fields)

    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=fields, extrasaction='ignore', lineterminator='\n')
    writer.writeheader()
    for item in data_list:
        writer.writerow(item)

    yield output.getvalue().rstrip('\n')


def flatten_dict(d: Dict[str, Any], sep: str = ';') -> Dict[str, Any]:
    """
    Flatten a nested dictionary one level for tabular output.

    Nested mappings are merged into the top level (without a prefix, so
    git_uri.host becomes host) and scalar lists are joined with sep.

    Example:
        {'name': 'a', 'git_uri': {'host': 'h'}, 'tags': ['x', 'y']}
        -> {'name': 'a', 'host': 'h', 'tags': 'x;y'}
    """
    flat: Dict[str, Any] = {}
    for k, v in d.items():
        if isinstance(v, dict):
            for sub_key, sub_value in v.items():
                flat.setdefault(sub_key, sub_value)
        elif isinstance(v, (list, tuple)):
            flat[k] = sep.join(str(item) for item in v)
        else:
            flat[k] = v
    return flat
