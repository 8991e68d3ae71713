import pytest

from hkviz.config import PlaybackConfig
from hkviz.logger import Logger
from hkviz.playback import PlaybackSession, PlaybackState, build_session
from hkviz.registry import Side
from hkviz.renderer import SceneRenderer
from hkviz.scheduler import EffectKind
from hkviz.steps import parse_step


@pytest.fixture
def session():
    return PlaybackSession(config=PlaybackConfig(step_duration=2.0), logger=Logger(echo=False))


def feed(session: PlaybackSession, *lines: str) -> None:
    for line in lines:
        session.handle(parse_step(line))


def effects_of(session: PlaybackSession, kind: EffectKind):
    return [e for e in session.scheduler.effects() if e.kind is kind]


def test_initialize_registers_vertices(session: PlaybackSession):
    feed(session, "Initialize: (A,B C,D)")
    reg = session.registry
    assert reg.count() == 4
    assert [v.name for v in reg.vertices(Side.LEFT)] == ["A", "B"]
    assert [v.name for v in reg.vertices(Side.RIGHT)] == ["C", "D"]
    assert session.state is PlaybackState.RUNNING
    assert session.time == 0.0

    nodes = effects_of(session, EffectKind.CREATE_NODE)
    assert [n.target for n in nodes] == ["left:A", "left:B", "right:C", "right:D"]
    assert [n.text for n in nodes] == ["A", "B", "C", "D"]
    assert {n.color for n in nodes if n.side is Side.LEFT} == {"red"}
    assert {n.color for n in nodes if n.side is Side.RIGHT} == {"blue"}
    assert all(n.scheduled_time == 0.0 for n in nodes)


def test_end_to_end_scenario(session: PlaybackSession):
    session.play_lines(["Initialize: (1,2 3,4)", "Add_edge: (1,3)(2,4)", "Update_match: (1,3)"])

    assert session.registry.count() == 4
    assert session.registry.edge_count() == 2

    recolors = effects_of(session, EffectKind.RECOLOR_EDGE)
    assert len(recolors) == 1
    assert recolors[0].target == "1_3"
    assert recolors[0].color == "yellow"
    assert recolors[0].scheduled_time == session.config.step_duration

    texts = [e.text for e in effects_of(session, EffectKind.SET_NARRATION_TEXT)]
    assert "Found match(es): Node 1 and Node 3" in texts
    assert texts[-1] == "Found final matching!"
    assert session.state is PlaybackState.FINISHED


@pytest.mark.parametrize(
    "line, advances",
    [
        ("Add_edge: (1,3) (2,4)", False),
        ("Add_path: (1,3) (2,4)", True),
        ("Update_match: (1,3) (2,4)", True),
        ("Disregard_vertices: (1,3) (2,4)", True),
        ("Disregard_vertices:", True),
        ("Begin_Phase1", True),
        ("Maximum matching: 2", True),
    ],
)
def test_clock_advances_once_per_event(session: PlaybackSession, line, advances):
    feed(session, "Initialize: (1,2 3,4)")
    if not line.startswith("Add_edge"):
        feed(session, "Add_edge: (1,3) (2,4)")
    before = session.time
    feed(session, line)
    expected = before + (session.config.step_duration if advances else 0.0)
    assert session.time == expected


def test_add_edge_adds_settle_pause(session: PlaybackSession):
    feed(session, "Initialize: (1,2 3,4)", "Add_edge: (1,3)", "Begin_Phase1")
    created = effects_of(session, EffectKind.CREATE_EDGE)
    assert created[0].start_delay == 0.0
    phase = effects_of(session, EffectKind.SET_PHASE_TEXT)[0]
    assert phase.scheduled_time == 2.0
    assert phase.start_delay == session.config.settle_delay
    assert phase.due_time == 2.0 + session.config.settle_delay


def test_add_path_alternates_colors(session: PlaybackSession):
    feed(session, "Initialize: (1,2 3,4)", "Add_edge: (1,3) (2,3) (2,4)", "Add_path: (1,3) (2,3) (2,4)")
    recolors = effects_of(session, EffectKind.RECOLOR_EDGE)
    assert [e.color for e in recolors] == ["green", "white", "green"]
    assert {e.width for e in recolors} == {0.08}
    assert {e.z_order for e in recolors} == {-1}
    assert {e.scheduled_time for e in recolors} == {2.0}

    highlights = effects_of(session, EffectKind.HIGHLIGHT_NODE)
    assert len(highlights) == 6
    assert {e.scheduled_time for e in highlights} == {2.0}
    assert {e.color for e in highlights} == {"white"}
    assert highlights[0].start_color == "red" and highlights[1].start_color == "blue"


def test_recolor_starts_from_current_color(session: PlaybackSession):
    feed(session, "Initialize: (1 2)", "Add_edge: (1,2)", "Add_path: (1,2)", "Update_match: (1,2)")
    path, match = effects_of(session, EffectKind.RECOLOR_EDGE)
    assert path.start_color == session.config.edge_color
    assert match.start_color == "green"
    assert session.registry.lookup_edge("1", "2").color == "yellow"


def test_disregard_pushes_edges_further_back(session: PlaybackSession):
    feed(
        session,
        "Initialize: (1,2 3,4)",
        "Add_edge: (1,3) (1,4) (2,4)",
        "Disregard_vertices: (1,3) (1,4)",
        "Disregard_vertices: (2,4)",
    )
    recolors = effects_of(session, EffectKind.RECOLOR_EDGE)
    assert [e.z_order for e in recolors] == [-3, -4, -5]
    assert {e.color for e in recolors} == {"grey"}
    assert {e.width for e in recolors} == {0.05}
    assert session.scheduler.lowest_sprite_order == -5


def test_empty_disregard_only_narrates(session: PlaybackSession):
    feed(session, "Initialize: (1 2)")
    count = len(session.scheduler)
    feed(session, "Disregard_vertices:")
    new = list(session.scheduler.effects())[count:]
    assert [(e.kind, e.text) for e in new] == [(EffectKind.SET_NARRATION_TEXT, "No edges to ignore.")]


def test_phase_and_terminal_texts(session: PlaybackSession):
    session.play_lines(["Initialize: (1 2)", "Begin_Phase1", "Maximum matching: 1"])
    narr = [e.text for e in effects_of(session, EffectKind.SET_NARRATION_TEXT)]
    labels = [e.text for e in effects_of(session, EffectKind.SET_PHASE_TEXT)]
    assert narr[1:] == ["Begin Phase 1", "Finished", "Maximum matching: 1"]
    assert labels == ["Phase 1", "Maximum matching is  1"]

    final = effects_of(session, EffectKind.SET_NARRATION_TEXT)[-1]
    assert final.scheduled_time == 3 * session.config.step_duration
    assert session.phases == ["1"]
    assert session.result == " 1"


def test_reversed_pair_is_dropped_and_playback_continues(session: PlaybackSession):
    session.play_lines([
        "Initialize: (1 2)",
        "Add_edge: (1,2)",
        "Update_match: (2,1)",
        "Begin_Phase2",
    ])
    assert session.dropped_effects == 1
    assert effects_of(session, EffectKind.RECOLOR_EDGE) == []
    assert [e.text for e in effects_of(session, EffectKind.SET_PHASE_TEXT)] == ["Phase 2"]
    assert any("не найдено" in line for line in session.logger.lines)


def test_lenient_edge_order_flag():
    config = PlaybackConfig(strict_edge_order=False)
    session = build_session(["Initialize: (1 2)", "Add_edge: (1,2)", "Update_match: (2,1)"], config=config)
    recolors = [e for e in session.scheduler.effects() if e.kind is EffectKind.RECOLOR_EDGE]
    assert [e.target for e in recolors] == ["1_2"]


def test_sides_numbered_from_one():
    session = build_session(["Initialize: (1,2 1,2)", "Add_edge: (1,1)(2,2)", "Update_match: (1,1)"])
    reg = session.registry
    assert reg.count(Side.LEFT) == 2
    assert reg.count(Side.RIGHT) == 2
    assert reg.edge_count() == 2
    assert session.dropped_effects == 0

    recolors = [e for e in session.scheduler.effects() if e.kind is EffectKind.RECOLOR_EDGE]
    assert [(e.target, e.color) for e in recolors] == [("1_1", "yellow")]
    highlights = [e for e in session.scheduler.effects() if e.kind is EffectKind.HIGHLIGHT_NODE]
    assert [e.target for e in highlights] == ["left:1", "right:1"]
    assert [e.start_color for e in highlights] == ["red", "blue"]

    renderer = SceneRenderer()
    runner = session.runner(renderer)
    runner.run()
    assert runner.dropped == 0
    assert sorted(renderer.nodes) == ["left:1", "left:2", "right:1", "right:2"]
    assert renderer.edges["1_1"].from_pos == (-0.5, 1.0)
    assert renderer.edges["1_1"].to_pos == (-0.5, -1.0)
    assert session.matched_edges() == [("1", "1")]


def test_edge_inside_one_side_is_dropped(session: PlaybackSession):
    session.play_lines(["Initialize: (a,b c)", "Add_edge: (a,b) (a,c)", "Update_match: (a,b)"])
    assert session.registry.edge_count() == 1
    assert session.dropped_effects == 2
    assert session.matched_edges() == []
    assert any("доле left" in line for line in session.logger.lines)


def test_missing_initialize_fails_lookups():
    session = build_session(["Add_edge: (1,2)", "Update_match: (1,2)"])
    assert session.registry.edge_count() == 0
    assert session.dropped_effects == 2
    assert session.state is PlaybackState.FINISHED


def test_bad_lines_are_skipped(session: PlaybackSession):
    session.play_lines(["Initialize: (1 2)", "Add_edge: (1,2,3)", "Nonsense", "Add_edge: (1,2)"])
    assert [n for n, _ in session.skipped_lines] == [2, 3]
    assert session.registry.edge_count() == 1


def test_duplicate_vertices_are_reported(session: PlaybackSession):
    feed(session, "Initialize: (1 2)", "Initialize: (1 3)")
    assert session.registry.count() == 3
    assert session.dropped_effects == 1


def test_cancel_stops_reading_lines(session: PlaybackSession):
    session.cancel()
    session.play_lines(["Initialize: (1 2)"])
    assert session.registry.count() == 0
    assert session.state is PlaybackState.FINISHED


def test_steps_after_finish_are_ignored(session: PlaybackSession):
    session.play_lines(["Initialize: (1 2)"])
    count = len(session.scheduler)
    feed(session, "Begin_Phase9")
    assert len(session.scheduler) == count


def test_played_scene_matches_registry(session: PlaybackSession):
    session.play_lines([
        "Initialize: (1,2 3,4)",
        "Add_edge: (1,3) (2,4) (2,3)",
        "Begin_Phase1",
        "Add_path: (1,3)",
        "Update_match: (1,3)",
        "Disregard_vertices: (2,3)",
        "Add_path: (2,4)",
        "Update_match: (2,4)",
        "Maximum matching: 2",
    ])
    renderer = SceneRenderer()
    runner = session.runner(renderer)
    runner.run()

    assert runner.dropped == 0
    assert renderer.edges["1_3"].color == (1.0, 1.0, 0.0)
    assert renderer.edges["2_3"].z_order == -3
    # после подсветки вершины возвращаются к исходному цвету
    assert renderer.nodes["left:1"].color == (1.0, 0.0, 0.0)
    assert renderer.nodes["right:4"].color == (0.0, 0.0, 1.0)
    assert renderer.texts == {"narration": "Maximum matching: 2", "phase": "Maximum matching is  2"}
    assert sorted(session.matched_edges()) == [("1", "3"), ("2", "4")]


@pytest.mark.parametrize(
    "kwargs",
    [dict(step_duration=-1.0), dict(settle_delay=-5.0), dict(edge_color_change_duration=-0.1), dict(smoothness=0.0)],
)
def test_config_rejects_bad_timing(kwargs):
    with pytest.raises(ValueError):
        PlaybackConfig(**kwargs)
