"""Tracking adaptors.

Components:
- Adaptor: start/stop/poll contract shared by tracking sources
- VTSAdaptor: VTube Studio iOS tracking over UDP
- AdaptorStateMachine: run lifecycle

Usage:
    from vts_tracking.adaptor import VTSAdaptor

    adaptor = VTSAdaptor()
    adaptor.start({"phoneIP": "192.168.1.20"})
    adaptor.poll()
    adaptor.stop()
"""

from vts_tracking.adaptor.base import Adaptor, Bone, BoneName
from vts_tracking.adaptor.state import (
    VALID_TRANSITIONS,
    AdaptorState,
    AdaptorStateMachine,
    StateTransition,
)
from vts_tracking.adaptor.vts import (
    VTSAdaptor,
    VTSAdaptorConfig,
    create_vts_adaptor,
    head_bone,
    validate_app_name,
)

__all__ = [
    "Adaptor",
    "AdaptorState",
    "AdaptorStateMachine",
    "Bone",
    "BoneName",
    "StateTransition",
    "VALID_TRANSITIONS",
    "VTSAdaptor",
    "VTSAdaptorConfig",
    "create_vts_adaptor",
    "head_bone",
    "validate_app_name",
]
