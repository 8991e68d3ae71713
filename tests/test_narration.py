import pytest

from hkviz import narration


def test_initialize_text():
    assert narration.initialize_text(["1", "2"], ["3", "4"]) == (
        "Set up the bipartite graph with the left verticies (1,2) and the right verticies (3,4) "
        "and create an empty matching. "
    )


def test_add_edge_text():
    assert narration.add_edge_text([("1", "2"), ("3", "4")]) == "Add edges between (1  , 2)(3  , 4)"


def test_add_edge_text_is_summarized_when_long():
    edges = [(str(i), str(i + 100)) for i in range(30)]
    assert narration.add_edge_text(edges) == "Add the edges."


def test_add_edge_text_threshold():
    # "Add edges between " — 18 символов, каждая пара "(a  , b)" — 8
    seven = [(str(i), str(i)) for i in range(7)]
    assert len(narration.add_edge_text(seven)) == 74
    eight = [(str(i), str(i)) for i in range(8)]
    assert narration.add_edge_text(eight) == "Add the edges."


def test_add_path_and_match_text():
    edges = [("a", "b"), ("c", "d")]
    assert narration.add_path_text(edges) == "Found an augmenting path from Node a to Node b, Node c to Node d"
    assert narration.update_match_text(edges) == "Found match(es): Node a and Node b, Node c and Node d"


@pytest.mark.parametrize(
    "edges, expected",
    [
        ([], "No edges to ignore."),
        ([("x", "y")], "Ignore edges between Node x and Node y"),
        ([("x", "y"), ("u", "v")], "Ignore edges between Node x and Node y, Node u and Node v"),
    ],
)
def test_disregard_text(edges, expected):
    assert narration.disregard_text(edges) == expected


def test_phase_and_result_text():
    assert narration.begin_phase_text("1") == ("Begin Phase 1", "Phase 1")
    assert narration.maximum_matching_text("3") == ("Finished", "Maximum matching is 3")
