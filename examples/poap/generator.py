"""
POAP record generator.

Reads every token of one POAP event from the POAP subgraph and emits one
record per token holder plus one record for the event itself.

Config (JSON)::

    {"eventId": "12345", "endpoint": "https://.../subgraphs/name/poap-xyz/poap-xdai"}
"""

from __future__ import annotations

from typing import Any

import requests
from eth_abi import encode

DEFAULT_ENDPOINT = "https://api.thegraph.com/subgraphs/name/poap-xyz/poap-xdai"
PAGE_SIZE = 100

# uint256 eventID, uint256 tokenID, uint64 created
TOKEN_SCHEMA = "0xb63cb2363b68bc425b3595ed490d4d6d8ccc2568998196458af1ed7c9c7890b3"
# uint256 eventID, uint64 created
EVENT_SCHEMA = "0x720beb94bc384589f72cd28edb027b1863698825847d1a73f4219f5a1154cf36"

EVENT_QUERY = """
query Event($eventId: ID!, $first: Int, $skip: Int) {
  event(id: $eventId) {
    id
    tokenCount
    created
    tokens(first: $first, skip: $skip) {
      id
      transferCount
      created
      owner {
        id
      }
    }
  }
}
"""


def _query(session: requests.Session, endpoint: str, event_id: str, skip: int, first: int) -> dict[str, Any]:
    response = session.post(
        endpoint,
        json={
            "query": EVENT_QUERY,
            "variables": {"eventId": event_id, "first": first, "skip": skip},
        },
        timeout=30,
    )
    response.raise_for_status()
    body = response.json()
    if body.get("errors"):
        raise RuntimeError(f"Subgraph query failed: {body['errors']}")
    event = body["data"]["event"]
    if event is None:
        raise RuntimeError(f"POAP event {event_id} not found")
    return event


def generate(config: dict[str, Any]) -> list[dict[str, Any]]:
    event_id = str(config["eventId"])
    endpoint = config.get("endpoint", DEFAULT_ENDPOINT)

    with requests.Session() as session:
        event = _query(session, endpoint, event_id, 0, 1)
        tokens: list[dict[str, Any]] = []
        for skip in range(0, int(event["tokenCount"]), PAGE_SIZE):
            tokens.extend(_query(session, endpoint, event_id, skip, PAGE_SIZE)["tokens"])

    records = [
        {
            "schema": TOKEN_SCHEMA,
            "recipient": token["owner"]["id"],
            "data": "0x" + encode(
                ["uint256", "uint256", "uint64"],
                [int(event["id"]), int(token["id"]), int(token["created"])],
            ).hex(),
        }
        for token in tokens
    ]
    records.append({
        "schema": EVENT_SCHEMA,
        "recipient": None,
        "data": "0x" + encode(
            ["uint256", "uint64"],
            [int(event["id"]), int(event["created"])],
        ).hex(),
    })
    return records
