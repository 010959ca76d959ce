import pytest

from domain.taxonomy import AliasTable, TopicResolver, build_taxonomy_graph, check_taxonomy
from infrastructure.io import FileSystemDocumentStore
from tools.scaffold_topic import parse_component, rule_filename, scaffold_topic, slugify


def test_parse_component_specs() -> None:
    assert parse_component("Radio Group") == ("radio-group", "Radio Group")
    assert parse_component("VaSelect = Select") == ("VaSelect", "Select")
    with pytest.raises(SystemExit):
        parse_component("=Select")


def test_rule_filename_is_slugged() -> None:
    assert slugify("  Icon Button!") == "icon-button"
    assert rule_filename("VaSelect") == "vaselect.rules.md"


def test_scaffolded_topic_builds_cleanly(tmp_path) -> None:
    written = scaffold_topic(tmp_path, "Vue", "Reactive", [("VaSelect", "Select"), ("va-card", "Card")], force=False)

    graph = build_taxonomy_graph(FileSystemDocumentStore(tmp_path).iter_documents())
    resolver = TopicResolver(graph, AliasTable.from_graph(graph))

    assert [p.name for p in written] == ["index.md", "vaselect.rules.md", "va-card.rules.md"]
    assert graph.topics["Vue"].components == ("VaSelect", "va-card")
    assert resolver.resolve_text("select").path == "Vue/vaselect.rules.md"
    assert check_taxonomy(graph) == []


def test_scaffold_refuses_non_empty_destination(tmp_path) -> None:
    scaffold_topic(tmp_path, "Vue", "Reactive", [("VaSelect", "Select")], force=False)

    with pytest.raises(SystemExit):
        scaffold_topic(tmp_path, "Vue", "Reactive", [("VaSelect", "Select")], force=False)


def test_front_matter_values_keep_their_text(tmp_path) -> None:
    scaffold_topic(tmp_path, "Vue", "Reactive", [("yes", "Foo: Bar"), ("123", "Numbers")], force=False)

    docs = {d.path: d for d in FileSystemDocumentStore(tmp_path).iter_documents()}
    graph = build_taxonomy_graph(docs.values())
    resolver = TopicResolver(graph, AliasTable.from_graph(graph))

    assert docs["Vue/yes.rules.md"].identifier == "yes"
    assert docs["Vue/yes.rules.md"].display_name == "Foo: Bar"
    assert docs["Vue/123.rules.md"].identifier == "123"
    assert graph.topics["Vue"].components == ("yes", "123")
    assert resolver.resolve_text("foo bar").path == "Vue/yes.rules.md"
    assert check_taxonomy(graph) == []
