#!/usr/bin/env python3
"""Example: Quickstart, cluster-plugins

Minimal working example: register a plugin, race a concurrent writer,
update and remove it, and inspect the request envelopes.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install cluster-plugins
"""
from __future__ import annotations

import json

import cluster_plugins
from cluster_plugins import (
    CLUSTER_PROPS_PATH,
    ClusterPluginsService,
    InMemoryCoordinationStore,
)


def main() -> None:
    print(f"cluster-plugins version: {cluster_plugins.__version__}")
    store = InMemoryCoordinationStore()
    service = ClusterPluginsService(store)

    # Step 1: Register a plugin; the class must be importable
    service.add({"name": "ordered", "class": "collections.OrderedDict", "path-prefix": "od"})
    print("\nAfter add:")
    print(json.dumps(service.handle_get(), indent=2))

    # Step 2: Another node edits the document while we update
    store.inject_conflict(
        CLUSTER_PROPS_PATH,
        lambda data: json.dumps({**json.loads(data), "urlScheme": "https"}).encode(),
    )
    outcome = service.update(
        {"name": "ordered", "class": "collections.OrderedDict", "path-prefix": "ordered"}
    )
    print(f"\nUpdate committed after {outcome.attempts} attempt(s)")
    print(store.get(CLUSTER_PROPS_PATH).data.decode("utf-8"))

    # Step 3: Rejected edits come back as error lists
    for body in (
        {"add": {"name": "ordered", "class": "collections.OrderedDict"}},
        {"add": {"name": "foo", "class": "pkg:Foo"}},
        {"remove": "missing"},
    ):
        print(f"\nPOST {json.dumps(body)}")
        print(f"  -> {service.handle_post(body).to_dict()}")

    # Step 4: Remove
    service.remove("ordered")
    print(f"\nAfter remove: {service.list_plugins()}")


if __name__ == "__main__":
    main()
