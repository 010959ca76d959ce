from concurrent.futures import ThreadPoolExecutor

import pytest

from application import TaxonomyService
from domain.schemas import DocumentDescriptor, ViolationKind
from domain.taxonomy import DuplicateIdentifierError


class MutableStore:
    def __init__(self, documents: list[DocumentDescriptor]) -> None:
        self.documents = list(documents)

    def iter_documents(self) -> list[DocumentDescriptor]:
        return list(self.documents)


def test_first_query_builds_the_snapshot(documents, alias_overrides) -> None:
    service = TaxonomyService(MutableStore(documents), alias_overrides=alias_overrides)

    result = service.resolve("icon button", topic_hint="WebAwesome")

    assert result.status == "found"
    assert result.path == "WebAwesome/icon-button.rules.md"


def test_reload_swaps_in_new_documents(documents, alias_overrides) -> None:
    store = MutableStore(documents)
    service = TaxonomyService(store, alias_overrides=alias_overrides)
    assert service.resolve("card").status == "not_found"

    store.documents.append(
        DocumentDescriptor(path="WebAwesome/card.rules.md", topic="WebAwesome", identifier="card", display_name="Card")
    )
    service.reload()

    assert service.resolve("card").path == "WebAwesome/card.rules.md"


def test_failed_reload_keeps_previous_snapshot(documents, alias_overrides) -> None:
    store = MutableStore(documents)
    service = TaxonomyService(store, alias_overrides=alias_overrides)
    before = service.graph

    store.documents.append(
        DocumentDescriptor(path="WebAwesome/zz-button.rules.md", topic="WebAwesome", identifier="button")
    )
    with pytest.raises(DuplicateIdentifierError):
        service.reload()

    assert service.graph is before
    assert service.resolve("button").path == "WebAwesome/button.rules.md"


def test_check_reports_duplicates_instead_of_raising(documents, alias_overrides) -> None:
    store = MutableStore(documents)
    store.documents.append(
        DocumentDescriptor(path="WebAwesome/zz-button.rules.md", topic="WebAwesome", identifier="button")
    )
    service = TaxonomyService(store, alias_overrides=alias_overrides)

    kinds = {v.kind for v in service.check()}

    assert ViolationKind.DUPLICATE_IDENTIFIER in kinds


def test_index_backed_service_serves_queries_but_cannot_reload(tmp_path, documents, alias_overrides) -> None:
    source = TaxonomyService(MutableStore(documents), alias_overrides=alias_overrides)
    path = source.save_index(tmp_path / "graph.json")

    service = TaxonomyService.from_index(path)

    assert service.resolve("row").path == "Angular/wa-cluster.rules.md"
    assert service.check() == []
    with pytest.raises(RuntimeError):
        service.reload()


def test_concurrent_queries_during_reload_always_see_a_complete_graph(documents, alias_overrides) -> None:
    store = MutableStore(documents)
    service = TaxonomyService(store, alias_overrides=alias_overrides)
    service.reload()

    def _query(i: int) -> str:
        if i % 10 == 0:
            service.reload()
        return service.resolve("WaInput", variant="number input").target

    with ThreadPoolExecutor(max_workers=8) as pool:
        targets = list(pool.map(_query, range(100)))

    assert set(targets) == {"Angular/wa-input.rules.md#number-input"}
