import io

import numpy as np
from PIL import Image
import matplotlib
matplotlib.use('Agg')
from matplotlib import pyplot as plt
from matplotlib.collections import LineCollection

# Editor handle colours
SEGMENT_COLOR = 'green'
VERTEX_COLOR = 'green'
SELECTED_COLOR = 'blue'
GHOST_COLOR = 'blue'
NEAR_GHOST_COLOR = 'cyan'
HOLE_COLOR = 'red'
TRIANGLE_COLOR = (0.6, 0.6, 0.6)


def render_graph_to_pil_image(
        graph,
        mesh=None,
        affine=None,
        selected=None,
        ghost_segments=(),
        image_size=(512, 512),
        bg_color='white',
        marker_size=6.0,
) -> Image.Image:
    """
    Renders a polygon graph, and optionally its triangulation, to a PIL image.

    Args:
        graph: PolygonGraph in editing space
        mesh: RawMesh in mesh-local space; drawn through ``affine`` when given
        selected: vertex handle drawn in the selection colour
        ghost_segments: ((a, b), near) pairs as returned by MeshEditor.ghost_segments
    """
    render_w, render_h = image_size
    dpi = 100
    fig = plt.figure(figsize=(render_w / dpi, render_h / dpi), dpi=dpi)
    ax = fig.add_axes([0, 0, 1, 1])
    ax.set_aspect('equal')
    ax.set_axis_off()
    fig.patch.set_facecolor(bg_color)
    ax.set_facecolor(bg_color)

    extent = [graph.positions()]
    if graph.holes:
        extent.append(np.asarray(graph.holes, dtype=float))

    if mesh is not None and not mesh.is_empty:
        verts = mesh.vertices if affine is None else affine.to_world_space(mesh.vertices).reshape(-1, 2)
        extent.append(verts)
        tris = verts[mesh.triangles]
        edges = np.concatenate([tris[:, [0, 1]], tris[:, [1, 2]], tris[:, [2, 0]]])
        ax.add_collection(LineCollection(edges, colors=[TRIANGLE_COLOR], linewidths=0.5))

    for (a, b), near in ghost_segments:
        if graph.is_vertex_deleted(a) or graph.is_vertex_deleted(b):
            continue
        pa, pb = graph.position(a), graph.position(b)
        ax.plot([pa[0], pb[0]], [pa[1], pb[1]], color=NEAR_GHOST_COLOR if near else GHOST_COLOR, linewidth=1.0)

    # Defined segments go above ghost segments
    lines = [(graph.position(a), graph.position(b)) for a, b in map(graph.endpoints, graph.live_segments())]
    if lines:
        ax.add_collection(LineCollection(lines, colors=[SEGMENT_COLOR], linewidths=1.5))

    for ref in graph.live_vertices():
        x, y = graph.position(ref)
        color = SELECTED_COLOR if ref == selected else VERTEX_COLOR
        ax.plot(x, y, 'o', color=color, markersize=marker_size, markerfacecolor='none')

    for x, y in graph.holes:
        ax.plot(x, y, 's', color=HOLE_COLOR, markersize=marker_size, markerfacecolor='none')

    points = np.concatenate([e.reshape(-1, 2) for e in extent])
    if len(points):
        lo = points.min(axis=0)
        hi = points.max(axis=0)
        pad = max(float((hi - lo).max()) * 0.05, 1e-3)
        ax.set_xlim(lo[0] - pad, hi[0] + pad)
        ax.set_ylim(lo[1] - pad, hi[1] + pad)

    buf = io.BytesIO()
    fig.savefig(buf, format='png', dpi=dpi, facecolor=bg_color, edgecolor='none',
                transparent=bg_color == 'none')
    plt.close(fig)
    buf.seek(0)

    img = Image.open(buf)
    if img.mode != 'RGBA':
        img = img.convert('RGBA')
    if img.size != (render_w, render_h):
        img = img.resize((render_w, render_h), Image.Resampling.NEAREST)
    return img
