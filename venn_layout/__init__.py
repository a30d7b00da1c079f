from .types import (
    AreaSpec,
    BisectionError,
    BoundingBox,
    Circle,
    EmptyCircleListError,
    InvalidAreaError,
    MissingOverlapError,
    Point,
    Solution,
    TextCentre,
    VennLayoutError,
    combination_key,
)
from .geometry import (
    circle_circle_intersection,
    circle_overlap,
    distance,
    distance_from_intersect_area,
    intersection_area,
)
from .optimize import bisect, conjugate_gradient, nelder_mead, scipy_nelder_mead
from .loss import loss_function
from .seeders import (
    BestInitialSeeder,
    ConstrainedMDSSeeder,
    GreedySeeder,
    best_initial_layout,
    constrained_mds_layout,
    greedy_layout,
)
from .config import LayoutConfig, LayoutOptions, get_layout_config, set_layout_config
from .solver import add_missing_areas, layout_venn, solution_loss, validate_areas, venn
from .orientation import disjoint_cluster, normalize_solution, orientate_circles, scale_solution
from .labels import compute_inner_radius, compute_text_centre, compute_text_centres
from .regions import RegionOutline, intersection_region_outline, region_outline_at
from .scatter import distribute_points
from .diagram import VennDiagram, VennSet, extract_sets
from .logging_utils import CollectingObserver, LayoutObserver, LayoutWarning, LoggingObserver

__all__ = [
    'AreaSpec',
    'BisectionError',
    'BoundingBox',
    'Circle',
    'EmptyCircleListError',
    'InvalidAreaError',
    'MissingOverlapError',
    'Point',
    'Solution',
    'TextCentre',
    'VennLayoutError',
    'combination_key',
    'circle_circle_intersection',
    'circle_overlap',
    'distance',
    'distance_from_intersect_area',
    'intersection_area',
    'bisect',
    'conjugate_gradient',
    'nelder_mead',
    'scipy_nelder_mead',
    'loss_function',
    'BestInitialSeeder',
    'ConstrainedMDSSeeder',
    'GreedySeeder',
    'best_initial_layout',
    'constrained_mds_layout',
    'greedy_layout',
    'LayoutConfig',
    'LayoutOptions',
    'get_layout_config',
    'set_layout_config',
    'add_missing_areas',
    'layout_venn',
    'solution_loss',
    'validate_areas',
    'venn',
    'disjoint_cluster',
    'normalize_solution',
    'orientate_circles',
    'scale_solution',
    'compute_inner_radius',
    'compute_text_centre',
    'compute_text_centres',
    'RegionOutline',
    'intersection_region_outline',
    'region_outline_at',
    'distribute_points',
    'VennDiagram',
    'VennSet',
    'extract_sets',
    'CollectingObserver',
    'LayoutObserver',
    'LayoutWarning',
    'LoggingObserver',
]
