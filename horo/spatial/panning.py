"""
Distance-Based Amplitude Panning Module

This module turns a point source position into one gain per speaker, and
provides AudioSource, a small holder that caches the gains of one source and
recomputes them whenever the source moves.
"""

import logging
from typing import TYPE_CHECKING, Optional

import numpy as np

from .exceptions import ValidationError
from .utils import GainVector, PositionLike, validate_position
from .vector_ops import fast_dbap_gains, fast_apply_gains

if TYPE_CHECKING:
    from .layouts import SpeakerLayout

# Set up logging
logger = logging.getLogger(__name__)


def dbap_gains(layout: 'SpeakerLayout', position: PositionLike) -> GainVector:
    """
    Compute DBAP gains of a point source for a speaker layout.

    Each active speaker's gain is proportional to its inverse distance from the
    source; the vector is normalized so the sum of squared gains equals the
    layout rolloff squared. Inactive (reserved) channels always get 0.

    A source exactly on a speaker gets that speaker's channel at full rolloff
    and silence everywhere else.

    Args:
        layout: The speaker layout
        position: Source position (x, y, z)

    Returns:
        Gains of shape (layout.num_channels(),) in channel order

    Raises:
        ValidationError: If the position is not three finite numbers
    """
    source = validate_position(position)
    gains = fast_dbap_gains(layout.positions, layout.active, source, layout.rolloff)

    if logger.isEnabledFor(logging.DEBUG):
        on_speaker = np.flatnonzero(np.all(layout.positions[layout.active] == source, axis=1))
        if on_speaker.size:
            channels = np.flatnonzero(layout.active)[on_speaker]
            logger.debug(f"Source at {tuple(source)} coincides with channel(s) {channels.tolist()}")

    return gains


class AudioSource:
    """
    A point source and its cached gain vector.

    Attributes:
        layout: Speaker layout the gains are computed for
        gains: Gains from the latest update
    """

    def __init__(self, layout: 'SpeakerLayout', position: PositionLike = (0.0, 0.0, 0.0)):
        self.layout = layout
        self._position = validate_position(position)
        self.gains = dbap_gains(layout, self._position)

    @property
    def position(self) -> np.ndarray:
        return self._position.copy()

    @position.setter
    def position(self, value: PositionLike) -> None:
        self._position = validate_position(value)
        self.update()

    def update(self) -> GainVector:
        """Recompute the gains for the current position."""
        self.gains = dbap_gains(self.layout, self._position)
        return self.gains

    def render(self, audio: np.ndarray, out: Optional[np.ndarray] = None) -> np.ndarray:
        """
        Apply the cached gains to a mono block.

        Args:
            audio: Mono audio block of shape (n_samples,)
            out: Optional float32 buffer of shape (n_channels, n_samples) to
                write into, so a render loop can reuse it

        Returns:
            Speaker signals of shape (n_channels, n_samples), float32
        """
        audio = np.asarray(audio, dtype=np.float32)
        if audio.ndim != 1:
            raise ValidationError(f"Audio block must be mono with shape (n_samples,), got {audio.shape}")

        shape = (len(self.gains), audio.shape[0])
        if out is None:
            out = np.empty(shape, dtype=np.float32)
        elif out.shape != shape or out.dtype != np.float32:
            raise ValidationError(f"Output buffer must be float32 with shape {shape}, "
                                  f"got {out.dtype} {out.shape}")

        fast_apply_gains(audio, self.gains.astype(np.float32), out)
        return out

    def __getitem__(self, channel: int) -> float:
        return float(self.gains[self.layout.check_channel(channel)])

    def __len__(self) -> int:
        return len(self.gains)

    def __str__(self) -> str:
        return "\n".join(f"mix at: {i} is {g}" for i, g in enumerate(self.gains))
