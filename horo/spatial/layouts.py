"""
Speaker Layout Module

This module places the speakers of a physical array in 3D space and answers
channel topology queries (opposite, next and reflected channel). A layout is
built once, after which its positions, rolloff and reflection table are
read-only and can be shared between any number of sources.

Coordinates are right-handed with y pointing up; the listener sits at the
origin.
"""

import logging
import operator
import functools
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional, Tuple, Union

import numpy as np
from scipy.spatial.distance import cdist

from .config import (
    DEFAULT_DECAY_DB, DEFAULT_MIRROR_NORMAL, TILT_ANGLE,
    TOP_RING, MIDDLE_RING, BOTTOM_RING, RESERVED_CHANNELS,
    TOP_RING_DIVISIONS, MIDDLE_RING_DIVISIONS, BOTTOM_RING_DIVISIONS,
    SpatializerConfig
)
from .exceptions import ConfigurationError, ValidationError, MathError
from .math_utils import quaternion_from_axis_angle, spin, decay_to_rolloff, mirror_points
from .panning import dbap_gains
from .utils import LayoutKind, GainVector, PositionLike, Vector3, vector_length

# Set up logging
logger = logging.getLogger(__name__)

UP_AXIS = (0.0, 1.0, 0.0)
TILT_AXIS = (0.0, 0.0, -1.0)
REFERENCE_DIRECTION = (-1.0, 0.0, 0.0)

# Position of channels that no placement routine fills
UNPLACED_POSITION = (0.0, 0.0, 0.0)


# =====================================================================================
# Placement routines
# =====================================================================================

def place_desktop() -> Tuple[np.ndarray, np.ndarray]:
    """
    Place a stereo pair at (-1, 0, 0) and (1, 0, 0).

    Returns:
        (positions, active): positions of shape (2, 3) and an all-True mask
    """
    positions = np.array([[-1.0, 0.0, 0.0],
                          [1.0, 0.0, 0.0]])
    active = np.ones(2, dtype=bool)
    return positions, active


def _place_ring(positions: np.ndarray, channels: range, reference: np.ndarray, divisions: int) -> None:
    for k, ch in enumerate(channels):
        q = quaternion_from_axis_angle(np.pi * k / divisions, UP_AXIS)
        positions[ch] = spin(reference, q)


def place_sphere() -> Tuple[np.ndarray, np.ndarray]:
    """
    Place 60 channels in three horizontal rings on the unit sphere.

    The reference direction (-1, 0, 0) is tilted up (top ring) or down
    (bottom ring) by pi/8 about -z, then swept about the vertical axis:

    - top ring, channels [0, 12): angle pi * k / 12
    - middle ring, channels [16, 46): angle pi * k / 20, no tilt
    - bottom ring, channels [48, 60): angle pi * k / 12

    Channels 12-15, 46 and 47 are reserved. They keep UNPLACED_POSITION and
    are flagged inactive.

    Returns:
        (positions, active): positions of shape (60, 3) and the active mask
    """
    n_channels = LayoutKind.SPHERE.num_channels
    positions = np.tile(np.asarray(UNPLACED_POSITION, dtype=np.float64), (n_channels, 1))
    active = np.ones(n_channels, dtype=bool)
    active[list(RESERVED_CHANNELS)] = False

    horizon = np.asarray(REFERENCE_DIRECTION, dtype=np.float64)
    top = spin(horizon, quaternion_from_axis_angle(TILT_ANGLE, TILT_AXIS))
    bottom = spin(horizon, quaternion_from_axis_angle(-TILT_ANGLE, TILT_AXIS))

    _place_ring(positions, TOP_RING, top, TOP_RING_DIVISIONS)
    _place_ring(positions, MIDDLE_RING, horizon, MIDDLE_RING_DIVISIONS)
    _place_ring(positions, BOTTOM_RING, bottom, BOTTOM_RING_DIVISIONS)

    return positions, active


_PLACEMENTS: Dict[LayoutKind, Callable[[], Tuple[np.ndarray, np.ndarray]]] = {
    LayoutKind.DESKTOP: place_desktop,
    LayoutKind.SPHERE: place_sphere,
}


# =====================================================================================
# Channel topology tables
# =====================================================================================

def build_reflection_table(positions: np.ndarray, active: np.ndarray,
                           normal: PositionLike = DEFAULT_MIRROR_NORMAL) -> np.ndarray:
    """
    Pair every channel with the channel closest to its mirror image.

    The mirror plane passes through the origin with the given normal. The cost
    of pairing i with j is the distance from the mirror image of i to j, which
    is symmetric in i and j. Pairs are accepted greedily in ascending
    (cost, i, j) order while both channels are free. Active channels are only
    paired with active channels, inactive with inactive.

    The result is an involution. It has no fixed points as long as each class
    (active, inactive) holds an even number of channels; an odd leftover
    channel maps to itself.

    Args:
        positions: Speaker positions of shape (n_channels, 3)
        active: Boolean mask of shape (n_channels,)
        normal: Mirror plane normal

    Returns:
        Integer array of shape (n_channels,) mapping channel -> reflected channel
    """
    n_channels = positions.shape[0]
    cost = cdist(mirror_points(positions, normal), positions)

    i_idx, j_idx = np.triu_indices(n_channels, k=1)
    same_class = active[i_idx] == active[j_idx]
    i_idx, j_idx = i_idx[same_class], j_idx[same_class]
    pair_cost = cost[i_idx, j_idx]

    table = np.arange(n_channels)
    paired = np.zeros(n_channels, dtype=bool)
    for p in np.lexsort((j_idx, i_idx, pair_cost)):
        i, j = i_idx[p], j_idx[p]
        if paired[i] or paired[j]:
            continue
        table[i], table[j] = j, i
        paired[i] = paired[j] = True

    return table


@functools.lru_cache(maxsize=None)
def channel_groups(kind: LayoutKind) -> Mapping[str, Tuple[int, ...]]:
    """
    Named channel groups of a layout kind.

    Built once per kind and shared; the returned mapping is read-only.
    """
    if kind is LayoutKind.DESKTOP:
        groups = {'left': (0,), 'right': (1,)}
    elif kind is LayoutKind.SPHERE:
        groups = {
            'top': tuple(TOP_RING),
            'middle': tuple(MIDDLE_RING),
            'bottom': tuple(BOTTOM_RING),
            'reserved': RESERVED_CHANNELS,
        }
    else:
        raise ConfigurationError(f"No channel groups for layout kind: {kind!r}")
    return MappingProxyType(groups)


# =====================================================================================
# Speaker layout
# =====================================================================================

class SpeakerLayout:
    """
    A fixed array of speakers with a DBAP mixing law.

    Attributes:
        kind: The physical arrangement
        decay_db: Decay in dB the rolloff was derived from
        rolloff: Linear gain scale applied after normalization
        mirror_normal: Normal of the plane used for the reflection table
    """

    def __init__(self, kind: Union[LayoutKind, str] = LayoutKind.SPHERE,
                 decay_db: float = DEFAULT_DECAY_DB,
                 num_channels: Optional[int] = None,
                 mirror_normal: Vector3 = DEFAULT_MIRROR_NORMAL):
        """
        Initialize the layout.

        Args:
            kind: Layout kind, as a LayoutKind or its name ('desktop', 'sphere')
            decay_db: Decay in dB, converted to rolloff = 10^(-decay_db/20)
            num_channels: Expected channel count; must match the kind if given
            mirror_normal: Normal of the mirror plane for reflect()

        Raises:
            ConfigurationError: If the kind is unknown or the channel count
                does not match it
        """
        self.kind = LayoutKind.parse(kind)
        if num_channels is not None and num_channels != self.kind.num_channels:
            raise ConfigurationError(
                f"{self.kind.name.lower()} layout has {self.kind.num_channels} channels, "
                f"got {num_channels}")

        self.mirror_normal = tuple(float(c) for c in mirror_normal)
        if len(self.mirror_normal) != 3 or vector_length(self.mirror_normal) < 1e-12:
            raise ConfigurationError(f"Invalid mirror plane normal: {mirror_normal!r}")

        self.decay_db = decay_db
        self.reinitialize(decay_db)

    @classmethod
    def from_config(cls, config: SpatializerConfig) -> 'SpeakerLayout':
        """Create a layout from a SpatializerConfig."""
        return cls(config.layout, decay_db=config.decay_db, mirror_normal=config.mirror_normal)

    def reinitialize(self, decay_db: Optional[float] = None) -> None:
        """
        Rebuild positions, rolloff and reflection table.

        Args:
            decay_db: New decay in dB, or None to keep the current one

        Raises:
            ConfigurationError: If the decay is not finite
        """
        if decay_db is None:
            decay_db = self.decay_db
        try:
            rolloff = decay_to_rolloff(decay_db)
        except (TypeError, OverflowError, MathError.DomainError) as e:
            raise ConfigurationError(f"Invalid decay: {decay_db!r}") from e

        positions, active = _PLACEMENTS[self.kind]()
        reflection = build_reflection_table(positions, active, self.mirror_normal)

        for array in (positions, active, reflection):
            array.flags.writeable = False

        self.decay_db = decay_db
        self.rolloff = rolloff
        self._positions = positions
        self._active = active
        self._reflection = reflection

        logger.info(f"Initialized {self.kind.name.lower()} speaker layout: "
                    f"{self.num_channels()} channels, rolloff {rolloff:.4f}")

    @property
    def positions(self) -> np.ndarray:
        """Read-only speaker positions, shape (n_channels, 3)."""
        return self._positions

    @property
    def active(self) -> np.ndarray:
        """Read-only mask of channels that take part in mixing."""
        return self._active

    @property
    def reflection_table(self) -> np.ndarray:
        return self._reflection

    @property
    def groups(self) -> Mapping[str, Tuple[int, ...]]:
        return channel_groups(self.kind)

    def num_channels(self) -> int:
        return self.kind.num_channels

    def check_channel(self, channel: int) -> int:
        """
        Validate a channel index.

        Raises:
            ValidationError: If the channel is not an integer in [0, N)
        """
        try:
            channel = operator.index(channel)
        except TypeError as e:
            raise ValidationError(f"Channel must be an integer, got {channel!r}") from e
        if not 0 <= channel < self.num_channels():
            raise ValidationError(f"Channel {channel} out of range [0, {self.num_channels()})")
        return channel

    def move(self, channel: int, n: int) -> int:
        """Channel ``n`` steps from ``channel``, wrapping around the layout."""
        channel = self.check_channel(channel)
        try:
            n = operator.index(n)
        except TypeError as e:
            raise ValidationError(f"Step must be an integer, got {n!r}") from e
        return (channel + n) % self.num_channels()

    def opposite(self, channel: int) -> int:
        """
        Channel half the layout away.

        For an odd channel count this rounds the half-turn down.
        """
        return self.move(channel, self.num_channels() // 2)

    def next(self, channel: int) -> int:
        return self.move(channel, 1)

    def reflect(self, channel: int) -> int:
        """Mirrored channel, see build_reflection_table."""
        return int(self._reflection[self.check_channel(channel)])

    def mix(self, position: PositionLike) -> GainVector:
        """
        DBAP gains for a point source.

        Args:
            position: Source position (x, y, z)

        Returns:
            Fresh array of shape (n_channels,), one non-negative gain per channel
        """
        return dbap_gains(self, position)

    def __repr__(self) -> str:
        return (f"SpeakerLayout(kind={self.kind.name.lower()!r}, "
                f"decay_db={self.decay_db}, rolloff={self.rolloff:.4f})")
