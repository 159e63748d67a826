"""
Core map generation functionality.
"""

from .hex_grid import Hex, HexGrid, Point, DIRECTIONS, build_hex_grid
from .noise import NoiseSource
from .elevation import ElevationField, HexMapConfig, generate_hex_map
from .features import LandWaterClassifier, label_regions
from .smoothing import LoopPolicy, chaikin_smooth, polygon_area, select_loops, sort_loops_by_area
from .coastline import CoastOptions, CoastRefiner, CoastResult, CoastlineTracer, collect_border_segments
from .hydrology import RiverNetwork, RiverOptions, RiverPolyline, RiverResult
from .map_stats import MapDebugInfo, compute_debug_info
from .world import WorldResult, WorldSteps, generate_world, generate_world_steps

__all__ = ['Hex', 'HexGrid', 'Point', 'DIRECTIONS', 'build_hex_grid', 'NoiseSource',
           'ElevationField', 'HexMapConfig', 'generate_hex_map',
           'LandWaterClassifier', 'label_regions',
           'LoopPolicy', 'chaikin_smooth', 'polygon_area', 'select_loops', 'sort_loops_by_area',
           'CoastOptions', 'CoastRefiner', 'CoastResult', 'CoastlineTracer', 'collect_border_segments',
           'RiverNetwork', 'RiverOptions', 'RiverPolyline', 'RiverResult',
           'MapDebugInfo', 'compute_debug_info',
           'WorldResult', 'WorldSteps', 'generate_world', 'generate_world_steps']
