import numpy as np
import pytest

from spritemesh import InvalidConfigurationError, InvalidInputError, MeshEditor, PolygonGraph
import spritemesh.session as session_module


@pytest.fixture
def editor(identity, metrics):
    return MeshEditor(identity, metrics, select_distance=0.1)


def _triangle_by_clicks(editor):
    assert editor.click((0, 0), control=True) == 'add_vertex'
    assert editor.click((1, 0), control=True) == 'add_vertex'
    assert editor.click((1, 1), control=True) == 'add_vertex'
    # (1, 1) is selected: connect it to both earlier vertices
    assert editor.click((0, 0), control=True) == 'add_segment'
    assert editor.click((1, 0), control=True) == 'add_segment'
    assert editor.click((0, 0)) == 'select'
    assert editor.click((1, 0), control=True) == 'add_segment'


def test_clicks_build_a_triangle(editor):
    _triangle_by_clicks(editor)
    assert len(editor.graph) == 3
    assert len(editor.graph.live_segments()) == 3
    mesh = editor.build_mesh()
    assert len(mesh.triangles) == 1
    assert mesh.uvs.shape == (3, 2)


def test_plain_click_in_empty_space_does_nothing(editor):
    _triangle_by_clicks(editor)
    assert editor.click((0.5, 0.6)) is None
    assert len(editor.graph) == 3


def test_shift_click_removes_segment_then_vertex(editor):
    _triangle_by_clicks(editor)
    assert editor.click((0.5, 0.0), shift=True) == 'remove_segment'
    assert len(editor.graph.live_segments()) == 2
    assert editor.click((1, 1), shift=True) == 'remove_vertex'
    assert editor.selected is None
    assert len(editor.graph) == 2
    assert editor.graph.live_segments() == []


def test_control_click_on_vertex_without_selection_selects_it(editor):
    editor.click((0, 0), control=True)
    editor.selected = None
    assert editor.click((0, 0), control=True) == 'select'
    assert len(editor.graph) == 1


def test_alt_click_toggles_hole(editor):
    assert editor.click((2, 2), alt=True) == 'add_hole'
    assert editor.graph.holes == [(2.0, 2.0)]
    assert editor.click((2.05, 2), alt=True) == 'remove_hole'
    assert editor.graph.holes == []


def test_ghost_segments_mark_nearest_candidate(editor):
    _triangle_by_clicks(editor)
    ghosts = editor.ghost_segments((0.5, 0.02))
    assert len(ghosts) == 2
    near = [pair for pair, is_near in ghosts if is_near]
    assert len(near) == 1
    assert editor.graph.position(near[0][1]) == (1.0, 0.0)
    assert not any(is_near for _, is_near in editor.ghost_segments((0.2, 0.8)))


def test_build_mesh_is_cached_until_edit(editor, monkeypatch):
    calls = []
    original = session_module.triangulate

    def counting(*args, **kwargs):
        calls.append(1)
        return original(*args, **kwargs)

    monkeypatch.setattr(session_module, 'triangulate', counting)
    _triangle_by_clicks(editor)
    first = editor.build_mesh()
    second = editor.build_mesh()
    assert len(calls) == 1
    assert np.array_equal(first.vertices, second.vertices)
    assert not editor.dirty

    editor.move_vertex(editor.graph.live_vertices()[2], (1.2, 1.2))
    assert editor.dirty
    editor.build_mesh()
    assert len(calls) == 2


def test_returned_mesh_is_independent(editor):
    _triangle_by_clicks(editor)
    mesh = editor.build_mesh()
    mesh.vertices[:] = 99
    assert not np.any(editor.build_mesh().vertices == 99)


def test_load_boundary_and_uvs_cover_texture(editor, disc_bitmap):
    graph = editor.load_boundary(disc_bitmap)
    assert editor.graph is graph
    mesh = editor.build_mesh()
    assert not mesh.is_empty
    assert mesh.uvs.min() >= -1e-9
    assert mesh.uvs.max() <= 1 + 1e-9
    assert mesh.uvs.min(axis=0) == pytest.approx((0, 0), abs=1e-9)


def test_failed_load_keeps_previous_graph(editor, disc_bitmap):
    _triangle_by_clicks(editor)
    before = editor.graph
    with pytest.raises(InvalidInputError):
        editor.load_boundary(disc_bitmap, simplify_tolerance=1000)
    assert editor.graph is before


def test_subdivide_continues_editing_from_edges(editor):
    editor.graph = PolygonGraph.from_loop([(-0.5, -0.5), (0.5, -0.5), (0.5, 0.5), (-0.5, 0.5)])
    mesh = editor.subdivide(2)
    assert len(mesh.triangles) == 8
    assert mesh.uvs is not None
    assert not editor.dirty
    assert len(editor.graph) == 9
    assert len(editor.graph.live_segments()) == 16
    assert len(editor.build_mesh().triangles) == 8


def test_reimport_mesh_marks_dirty(editor):
    _triangle_by_clicks(editor)
    mesh = editor.build_mesh()
    graph = editor.reimport_mesh(mesh)
    assert editor.dirty
    assert len(graph) == 3
    assert editor.selected is None


def test_reset_clears_everything(editor):
    _triangle_by_clicks(editor)
    editor.click((5, 5), alt=True)
    editor.reset()
    assert len(editor.graph) == 0
    assert editor.graph.holes == []
    assert editor.build_mesh().is_empty


def test_save_hands_mesh_to_sink(editor):
    _triangle_by_clicks(editor)
    received = []
    editor.save(received.append)
    assert len(received) == 1
    assert received[0].uvs is not None


def test_editor_requires_affine(metrics):
    with pytest.raises(InvalidConfigurationError):
        MeshEditor(None, metrics)
