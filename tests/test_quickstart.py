"""Test that the quickstart API works for cluster-plugins."""
from __future__ import annotations


def test_quickstart_import() -> None:
    from cluster_plugins import ClusterPluginsService, InMemoryCoordinationStore

    service = ClusterPluginsService(InMemoryCoordinationStore())
    assert service is not None


def test_quickstart_empty_registry() -> None:
    from cluster_plugins import ClusterPluginsService, InMemoryCoordinationStore

    service = ClusterPluginsService(InMemoryCoordinationStore())
    assert service.list_plugins() == {}


def test_quickstart_add_and_list() -> None:
    from cluster_plugins import ClusterPluginsService, InMemoryCoordinationStore

    service = ClusterPluginsService(InMemoryCoordinationStore())
    service.add({"name": "od", "class": "collections.OrderedDict"})
    assert service.list_plugins() == {
        "od": {"name": "od", "class": "collections.OrderedDict"}
    }


def test_quickstart_post_envelope() -> None:
    from cluster_plugins import ClusterPluginsService, InMemoryCoordinationStore

    service = ClusterPluginsService(InMemoryCoordinationStore())
    response = service.handle_post({"remove": "nothing-here"})
    assert response.errors == ["No such plugin: nothing-here"]


def test_quickstart_version() -> None:
    import cluster_plugins

    assert cluster_plugins.__version__ == "0.1.0"


def test_quickstart_all_exports_resolve() -> None:
    import cluster_plugins

    for name in cluster_plugins.__all__:
        assert hasattr(cluster_plugins, name), name
