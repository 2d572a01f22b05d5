"""
General Utility Functions and Definitions

This module contains type definitions, enumerations and validation helpers
used across the spatializer.

See Also:
    - config: For layout constants and configuration management
    - math_utils: For quaternion and rolloff math
"""

import math
import numpy as np
from enum import Enum
from typing import Tuple, Union, Sequence

from .config import DESKTOP_CHANNELS, SPHERE_CHANNELS
from .exceptions import ConfigurationError, ValidationError

# Type aliases for improved readability
Vector3 = Tuple[float, float, float]  # (x, y, z), y is up
Quaternion = np.ndarray  # Shape: (4,), scalar first (w, x, y, z)
GainVector = np.ndarray  # Shape: (n_channels,)
PositionLike = Union[Vector3, Sequence[float], np.ndarray]


class LayoutKind(Enum):
    """
    Physical speaker arrangements.
    
    The value of each member is its fixed channel count.
    
    Attributes:
        DESKTOP: Stereo pair on the x axis, for bench testing
        SPHERE: 60-channel spherical array in three horizontal rings
    """
    DESKTOP = DESKTOP_CHANNELS
    SPHERE = SPHERE_CHANNELS
    
    @property
    def num_channels(self) -> int:
        return self.value
    
    @classmethod
    def parse(cls, kind: Union['LayoutKind', str]) -> 'LayoutKind':
        """
        Resolve a layout kind from an enum member or its case-insensitive name.
        
        Raises:
            ConfigurationError: If the kind is not recognized
        """
        if isinstance(kind, cls):
            return kind
        if isinstance(kind, str):
            try:
                return cls[kind.strip().upper()]
            except KeyError:
                pass
        raise ConfigurationError(f"Unrecognized layout kind: {kind!r}")


def validate_position(position: PositionLike) -> np.ndarray:
    """
    Validate a 3D position and return it as a float64 array.
    
    Args:
        position: (x, y, z) coordinates
        
    Returns:
        Array of shape (3,)
    
    Raises:
        ValidationError: If the position is not three finite numbers
    """
    try:
        vec = np.asarray(position, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Position must be numeric, got {position!r}") from e
    
    if vec.shape != (3,):
        raise ValidationError(f"Position must have shape (3,), got {vec.shape}")
    
    if not np.all(np.isfinite(vec)):
        raise ValidationError(f"Position must be finite, got {position!r}")
    
    return vec


def vector_length(v: PositionLike) -> float:
    """Euclidean length of a 3D vector."""
    x, y, z = v
    return math.sqrt(x*x + y*y + z*z)
