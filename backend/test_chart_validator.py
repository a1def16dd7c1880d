"""Chart consistency checks and automatic repair"""

from lnsim.ir.chart import EntityRef
from lnsim.registry import create_network
from lnsim.validation import (
    ValidationSeverity,
    fix_chart,
    validate_and_fix_chart,
    validate_chart,
)
from lnsim.visual import init_chart_from_network


def make_chart():
    network = create_network(1, "test network", lnd_nodes=2, clightning_nodes=0, eclair_nodes=0)
    return network, init_chart_from_network(network)


def make_broken_chart():
    network, chart = make_chart()
    del chart.nodes["bob"]                                  # leaves bob-backend1 dangling
    chart.selected = EntityRef(type="node", id="ghost")
    chart.hovered = EntityRef(type="link", id="ghost-link")
    chart.scale = 5.0
    return network, chart


def test_fresh_chart_is_valid():
    network, chart = make_chart()

    result = validate_chart(chart, network)

    assert result.is_valid
    assert result.issues == []
    assert result.stats == {"nodes": 3, "links": 2, "network_nodes": 3}
    assert result.get_summary() == "Valid | Errors: 0, Warnings: 0"


def test_broken_chart_issues():
    network, chart = make_broken_chart()

    result = validate_chart(chart, network)

    assert not result.is_valid
    assert sorted(result.codes) == sorted([
        "DANGLING_LINK_SOURCE",
        "ORPHANED_SELECTION",
        "ORPHANED_HOVER",
        "MISSING_CHART_NODE",
        "INVALID_SCALE",
    ])
    dangling = next(i for i in result.issues if i.code == "DANGLING_LINK_SOURCE")
    assert dangling.severity == ValidationSeverity.ERROR
    assert dangling.link_id == "bob-backend1"
    assert result.warning_count == 2


def test_missing_backend_link():
    network, chart = make_chart()
    del chart.links["alice-backend1"]

    result = validate_chart(chart, network)

    assert result.codes == ["MISSING_BACKEND_LINK"]
    assert result.issues[0].node_id == "alice"


def test_fix_repairs_everything_on_a_copy():
    network, chart = make_broken_chart()

    fixed, result = fix_chart(chart, network)

    assert result.success
    assert result.issues_remaining == []
    assert "bob" in fixed.nodes
    assert "bob-backend1" in fixed.links
    assert fixed.selected is None
    assert fixed.hovered is None
    assert fixed.scale == 1.0
    assert validate_chart(fixed, network).is_valid

    # input untouched
    assert "bob" not in chart.nodes
    assert chart.scale == 5.0


def test_validate_and_fix_leaves_valid_chart_alone():
    network, chart = make_chart()

    result_chart, validation, fix = validate_and_fix_chart(chart, network)

    assert result_chart is chart
    assert validation.is_valid
    assert fix.changes_made == []
