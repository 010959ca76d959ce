import pytest

from domain.schemas import DocumentDescriptor, DocumentKind
from domain.taxonomy import AliasTable, TaxonomyGraph, TopicResolver, build_taxonomy_graph


def make_documents() -> list[DocumentDescriptor]:
    """Two topics in two groups, fully linked and mirrored (no violations)."""
    return [
        # WebAwesome
        DocumentDescriptor(
            path="WebAwesome/index.md",
            group="Standard",
            topic="WebAwesome",
            kind=DocumentKind.INDEX,
            links=(
                "WebAwesome/button.rules.md",
                "WebAwesome/icon-button.rules.md",
                "WebAwesome/input.rules.md",
                "WebAwesome/input.rules.md#number-input",
                "WebAwesome/radio.rules.md",
                "WebAwesome/radio-group.rules.md",
                "WebAwesome/tab.rules.md",
            ),
        ),
        DocumentDescriptor(
            path="WebAwesome/button.rules.md",
            topic="WebAwesome",
            identifier="button",
            display_name="Button",
            anchors=("variants", "sizes"),
            related=("icon-button",),
        ),
        DocumentDescriptor(
            path="WebAwesome/icon-button.rules.md",
            topic="WebAwesome",
            identifier="icon-button",
            display_name="Icon Button",
            related=("button",),
        ),
        DocumentDescriptor(
            path="WebAwesome/input.rules.md",
            topic="WebAwesome",
            identifier="input",
            display_name="Input",
            aliases=("text input",),
            anchors=("number-input", "password-input"),
        ),
        DocumentDescriptor(
            path="WebAwesome/radio.rules.md",
            topic="WebAwesome",
            identifier="radio",
            display_name="Radio",
            related=("radio-group",),
        ),
        DocumentDescriptor(
            path="WebAwesome/radio-group.rules.md",
            topic="WebAwesome",
            identifier="radio-group",
            display_name="Radio Group",
            related=("radio",),
        ),
        DocumentDescriptor(
            path="WebAwesome/tab.rules.md",
            topic="WebAwesome",
            identifier="tab",
            display_name="Tab",
        ),
        # Angular
        DocumentDescriptor(
            path="Angular/index.md",
            group="Reactive",
            topic="Angular",
            kind=DocumentKind.INDEX,
            links=(
                "Angular/web-components.md",
                "Angular/tab.rules.md",
                "Angular/wa-input.rules.md#number-input",
                "Angular/wa-input.rules.md",
                "Angular/wa-cluster.rules.md",
            ),
        ),
        DocumentDescriptor(
            path="Angular/web-components.md",
            topic="Angular",
            kind=DocumentKind.GUIDE,
            identifier="web-components-integration",
            display_name="Web Components Integration",
        ),
        DocumentDescriptor(
            path="Angular/tab.rules.md",
            topic="Angular",
            identifier="WaTab",
            display_name="Tab",
        ),
        DocumentDescriptor(
            path="Angular/wa-input.rules.md",
            topic="Angular",
            identifier="WaInput",
            display_name="WaInput",
            anchors=("number-input", "validation"),
        ),
        DocumentDescriptor(
            path="Angular/wa-cluster.rules.md",
            topic="Angular",
            identifier="WaCluster",
            display_name="WaCluster",
        ),
    ]


ALIAS_OVERRIDES = {
    "WebAwesome": {"icon button": "icon-button"},
    "Angular": {"row": "WaCluster"},
}


@pytest.fixture
def documents() -> list[DocumentDescriptor]:
    return make_documents()


@pytest.fixture
def graph(documents: list[DocumentDescriptor]) -> TaxonomyGraph:
    return build_taxonomy_graph(documents)


@pytest.fixture
def aliases(graph: TaxonomyGraph) -> AliasTable:
    return AliasTable.from_graph(graph, ALIAS_OVERRIDES)


@pytest.fixture
def resolver(graph: TaxonomyGraph, aliases: AliasTable) -> TopicResolver:
    return TopicResolver(graph, aliases)


@pytest.fixture
def alias_overrides() -> dict[str, dict[str, str]]:
    return {topic: dict(mapping) for topic, mapping in ALIAS_OVERRIDES.items()}
