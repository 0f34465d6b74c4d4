import pytest

from veris_search.incidents.query import SearchRequest
from veris_search.incidents.service import (
    CatalogFailed,
    IncidentSearchService,
    SearchFailed,
    unique_values,
)
from veris_search.incidents.store import InMemoryIncidentStore, StoreError


class _BrokenStore(InMemoryIncidentStore):
    def find(self, filter, limit, offset=0):
        raise StoreError("operation exceeded time limit")

    def distinct(self, path):
        raise StoreError("not authorized")


def _ids(docs):
    return [d["_id"] for d in docs]


def test_search_without_parameters_returns_everything(store):
    svc = IncidentSearchService(store)
    assert _ids(svc.search(SearchRequest())) == ["a1", "a2", "a3", "a4"]


def test_search_free_text(store):
    svc = IncidentSearchService(store)
    assert _ids(svc.search(SearchRequest(q="phishing"))) == ["a1"]
    # victim.name, victim.country (array) and reference are searched too
    assert _ids(svc.search(SearchRequest(q="globex"))) == ["a2"]
    assert _ids(svc.search(SearchRequest(q="us"))) == ["a1"]
    assert _ids(svc.search(SearchRequest(q="MISDELIVERY"))) == ["a4"]


def test_search_free_text_is_not_a_pattern(store):
    svc = IncidentSearchService(store)
    assert svc.search(SearchRequest(q=".*")) == []
    assert _ids(svc.search(SearchRequest(q="(via RDP)"))) == ["a3"]


def test_search_actor_membership(store):
    svc = IncidentSearchService(store)
    assert _ids(svc.search(SearchRequest(actor="Organized crime"))) == ["a1", "a3"]
    assert _ids(svc.search(SearchRequest(actor="End-user"))) == ["a2"]
    assert _ids(svc.search(SearchRequest(actor="Unknown"))) == ["a2", "a4"]
    assert svc.search(SearchRequest(actor="organized crime")) == []


def test_search_actor_and_action_is_conjunction(store):
    svc = IncidentSearchService(store)
    req = SearchRequest(actor="Organized crime", action="Ransomware")
    assert _ids(svc.search(req)) == ["a3"]
    assert svc.search(SearchRequest(actor="End-user", action="Ransomware")) == []


def test_search_asset(store):
    svc = IncidentSearchService(store)
    assert _ids(svc.search(SearchRequest(asset="S - Mail"))) == ["a1"]
    assert svc.search(SearchRequest(asset="Mail")) == []


def test_search_caps_results_at_fifty():
    store = InMemoryIncidentStore([{"_id": i, "summary": "match"} for i in range(51)])
    svc = IncidentSearchService(store)
    docs = svc.search(SearchRequest(q="match"))
    assert len(docs) == 50
    assert _ids(docs) == list(range(50))
    # asking for more than the cap is clamped
    assert len(svc.search(SearchRequest(), limit=500)) == 50
    assert _ids(svc.search(SearchRequest(), limit=5, offset=48)) == [48, 49, 50]


def test_search_is_repeatable(store):
    svc = IncidentSearchService(store)
    req = SearchRequest(q="o")
    assert svc.search(req) == svc.search(req)


def test_search_wraps_store_errors():
    svc = IncidentSearchService(_BrokenStore())
    with pytest.raises(SearchFailed) as exc:
        svc.search(SearchRequest(q="x"))
    assert exc.value.details == "operation exceeded time limit"


def test_catalog_unions_families(store):
    cat = IncidentSearchService(store).catalog()
    assert cat.actors == ["Organized crime", "Unknown", "Nation-state", "End-user"]
    assert set(cat.actions) == {
        "Phishing", "Theft", "Use of stolen creds", "Ransomware", "Privilege abuse",
    }
    assert cat.assets == ["P - End-user", "S - Mail", "U - Laptop", "S - Database"]


def test_catalog_sorted(store):
    cat = IncidentSearchService(store).catalog(sort=True)
    assert cat.actors == sorted(cat.actors)
    assert cat.actions == sorted(cat.actions)
    assert cat.assets == ["P - End-user", "S - Database", "S - Mail", "U - Laptop"]


def test_catalog_empty_collection():
    cat = IncidentSearchService(InMemoryIncidentStore()).catalog(sort=True)
    assert cat.to_dict() == {"actors": [], "actions": [], "assets": []}


def test_catalog_wraps_store_errors():
    with pytest.raises(CatalogFailed):
        IncidentSearchService(_BrokenStore()).catalog()


def test_unique_values_flattens_and_drops_falsy():
    values = ["b", ["a", ["b", ""]], None, "a", "c", 0]
    assert unique_values(values) == ["b", "a", "c"]
    assert unique_values(values, sort=True) == ["a", "b", "c"]


def test_search_limit_never_below_one(store):
    svc = IncidentSearchService(store)
    assert _ids(svc.search(SearchRequest(), limit=0)) == ["a1"]
    assert _ids(svc.search(SearchRequest(), limit=-3)) == ["a1"]
