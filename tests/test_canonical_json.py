import json

from system_info._internal.canonical_json import canonical_dumps


def test_canonical_dumps_is_compact_and_sorted():
    payload = {
        "b": 2,
        "a": {"z": 1, "y": 2},
        "list": [3, 2, 1],
    }

    assert canonical_dumps(payload) == '{"a":{"y":2,"z":1},"b":2,"list":[3,2,1]}'


def test_canonical_dumps_ignores_input_formatting():
    payload = {"name": "Radeon™", "heaps": {"local": {"size": 1}}}
    pretty = json.dumps(payload, indent=2)

    assert canonical_dumps(json.loads(pretty)) == canonical_dumps(payload)
    assert "Radeon™" in canonical_dumps(payload)
