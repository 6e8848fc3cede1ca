"""Adaptor Base Interface - uniform start/stop/poll contract.

A tracking adaptor owns its own I/O and publishes the latest pose and
blendshape state when the host application calls ``poll()`` once per
render tick. ``poll()`` must never block on I/O.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping

import numpy as np
from scipy.spatial.transform import Rotation as R


class BoneName(Enum):
    """Bones an adaptor can publish."""

    FT_HEAD = "ftHead"


@dataclass
class Bone:
    """Position plus scalar-first rotation quaternion (w, x, y, z)."""

    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    rotation: np.ndarray = field(
        default_factory=lambda: np.array([1.0, 0.0, 0.0, 0.0])
    )

    @classmethod
    def from_euler(
        cls,
        position: tuple[float, float, float],
        heading: float,
        attitude: float,
        bank: float,
    ) -> "Bone":
        """Build a bone from Euler angles in radians.

        Rotations compose intrinsically in the order Y (heading),
        X (attitude), Z (bank).
        """
        quat = R.from_euler("YXZ", [heading, attitude, bank]).as_quat(
            scalar_first=True
        )
        return cls(position=np.asarray(position, dtype=float), rotation=quat)

    def euler_yxz(self) -> np.ndarray:
        """Inverse of from_euler: (heading, attitude, bank) in radians."""
        return R.from_quat(self.rotation, scalar_first=True).as_euler("YXZ")


class Adaptor(ABC):
    """Tracking source the host application can start, stop and poll."""

    def __init__(self) -> None:
        self.bones: dict[BoneName, Bone] = {}
        self.blendshapes: dict[str, float] = {}

    @abstractmethod
    def start(self, options: Mapping[str, str] | None = None) -> None:
        """Start receiving with string options (see option_names)."""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop receiving and release every socket and thread."""
        pass

    @abstractmethod
    def poll(self) -> None:
        """Publish the newest data into ``bones`` and ``blendshapes``."""
        pass

    @abstractmethod
    def is_running(self) -> bool:
        """Whether the adaptor owns live I/O resources."""
        pass

    @abstractmethod
    def option_names(self) -> list[str]:
        """Option keys accepted by start()."""
        pass
