from .catalog import alias_of, identifiers_for, floors_of, areas_of, ALL_AREAS
from .filters import FilterState, FilterSnapshot, DEFAULT_FILTERS, describe_targets
from .modes import Family, VisualizationMode, all_modes, family_of, descriptor_of
from .dispatcher import ModeDispatcher, ModeSelection
from .spatial import SpatialRenderer, generate_points
from .playback import PlaybackController
from .statistical import StatisticalRenderer, StatisticalDataset
from .export import build_export_document, export_json
from .recording import PlaybackRecorder, RecordingParams
from .engine import Dashboard, DashboardConfig, RenderConfig
from .errors import AnalyticsError
