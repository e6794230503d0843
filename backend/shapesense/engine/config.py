"""Detection configuration — fixed thresholds of the segmentation and contour stages."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DetectionConfig:
    """Controls segmentation, noise filtering and contour refinement."""

    # Segmentation: foreground = alpha > alpha_min and mean(RGB) < intensity_max
    alpha_min: int = 200
    intensity_max: int = 128

    # Noise filters
    min_component_pixels: int = 50
    min_bbox_side: int = 10
    min_boundary_points: int = 8

    # Contour choice: extent below → concave (boundary); above → filled
    concave_extent: float = 0.40
    filled_extent: float = 0.80
    min_hull_points: int = 4

    # RDP epsilon as a fraction of the contour perimeter
    epsilon_ratio: float = 0.01
    fine_epsilon_ratio: float = 0.005
    coarse_epsilon_ratio: float = 0.03

    # Vertex-count refinement
    min_vertices: int = 4
    max_vertices: int = 12
    filled_max_vertices: int = 20
    sample_count: int = 12
