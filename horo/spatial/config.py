"""
Configuration Management Module

This module provides centralized configuration management for the spatializer,
including layout constants, default settings, and configuration utilities.
"""

import json
import math
from typing import Dict, Any, Tuple
from dataclasses import dataclass

from .exceptions import ConfigurationError


# =====================================================================================
# Constants
# =====================================================================================

# Rolloff
DEFAULT_DECAY_DB = 3.0  # dB, gives a rolloff of 10^(-3/20)

# Channel counts per layout kind
DESKTOP_CHANNELS = 2
SPHERE_CHANNELS = 60

# Sphere geometry
TILT_ANGLE = math.pi / 8  # elevation of the top and bottom rings
TOP_RING = range(0, 12)
MIDDLE_RING = range(16, 46)
BOTTOM_RING = range(48, 60)
RESERVED_CHANNELS = (12, 13, 14, 15, 46, 47)  # subwoofer is 47

# Angular step denominators for each ring (angle = pi * k / denominator)
TOP_RING_DIVISIONS = 12
MIDDLE_RING_DIVISIONS = 20
BOTTOM_RING_DIVISIONS = 12

# Default mirror plane used for the reflection table (left/right flip)
DEFAULT_MIRROR_NORMAL = (1.0, 0.0, 0.0)

SUPPORTED_LAYOUTS = ['desktop', 'sphere']


# =====================================================================================
# Configuration Classes
# =====================================================================================

@dataclass
class SpatializerConfig:
    """Configuration for a speaker layout and its panning law"""
    
    layout: str = 'sphere'
    decay_db: float = DEFAULT_DECAY_DB
    mirror_normal: Tuple[float, float, float] = DEFAULT_MIRROR_NORMAL
    
    def __post_init__(self):
        """Validate configuration after initialization"""
        if self.layout not in SUPPORTED_LAYOUTS:
            raise ConfigurationError(f"Layout {self.layout!r} not supported. Use one of: {SUPPORTED_LAYOUTS}")
        
        if not math.isfinite(self.decay_db):
            raise ConfigurationError("Decay must be a finite number of dB")
        
        self.mirror_normal = tuple(float(c) for c in self.mirror_normal)
        if len(self.mirror_normal) != 3:
            raise ConfigurationError("Mirror normal must be a tuple of (x, y, z)")
        
        if math.sqrt(sum(c * c for c in self.mirror_normal)) < 1e-10:
            raise ConfigurationError("Mirror normal must not be the zero vector")
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary for serialization"""
        return {
            'layout': self.layout,
            'decay_db': self.decay_db,
            'mirror_normal': list(self.mirror_normal),
        }
    
    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'SpatializerConfig':
        """Create configuration from dictionary"""
        return cls(
            layout=config_dict.get('layout', 'sphere'),
            decay_db=float(config_dict.get('decay_db', DEFAULT_DECAY_DB)),
            mirror_normal=tuple(config_dict.get('mirror_normal', DEFAULT_MIRROR_NORMAL))
        )
    
    def save(self, file_path: str) -> None:
        """Save configuration to file"""
        with open(file_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)
    
    @classmethod
    def load(cls, file_path: str) -> 'SpatializerConfig':
        """Load configuration from file"""
        with open(file_path, 'r') as f:
            return cls.from_dict(json.load(f))


# Create a default configuration
default_config = SpatializerConfig()
