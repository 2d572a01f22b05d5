"""
Horo Spatializer Package

Speaker layout generation and distance-based amplitude panning (DBAP) for
placing a point source anywhere around a fixed loudspeaker array.
"""

from .layouts import SpeakerLayout, channel_groups, place_desktop, place_sphere
from .panning import AudioSource, dbap_gains
from .config import SpatializerConfig
from .utils import LayoutKind
from .exceptions import SpatializerError, ConfigurationError, ValidationError
from .examples import demonstrate_desktop_sweep, demonstrate_sphere_orbit, main

__version__ = '0.1.0'
