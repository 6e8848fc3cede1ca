"""VTS Monitor - run the adaptor standalone and log what it receives.

Usage:
    python -m vts_tracking --phone-ip 192.168.1.20
    vts-monitor --phone-ip 192.168.1.20 --tick-hz 30 --duration 10

Values not given on the command line come from VTS_* environment
variables (see vts_tracking.config.settings).
"""

import argparse
import sys
import time
from typing import Sequence

from vts_tracking.adaptor import BoneName, create_vts_adaptor
from vts_tracking.config.constants import VTS
from vts_tracking.config.settings import get_settings
from vts_tracking.exceptions import VTSTrackingError
from vts_tracking.observability.logging import bind_peer, get_logger, init_logging

logger = get_logger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Receive VTube Studio face tracking and log head pose and blendshapes",
    )
    parser.add_argument("--phone-ip", help="Phone address (default: VTS_PHONE_IP)")
    parser.add_argument("--app-name", help="Client name shown in VTube Studio")
    parser.add_argument(
        "--tick-hz", type=float, default=30.0, help="Poll rate (default: 30)"
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=0.0,
        help="Stop after this many seconds (default: run until Ctrl-C)",
    )
    parser.add_argument(
        "--top", type=int, default=5, help="Blendshapes to log per frame (default: 5)"
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def _log_frame(adaptor, top: int) -> None:
    frame = adaptor.last_frame
    head = adaptor.bones[BoneName.FT_HEAD]
    strongest = sorted(adaptor.blendshapes.items(), key=lambda kv: kv[1], reverse=True)
    logger.info(
        "vts_frame",
        timestamp=frame.timestamp,
        face_found=frame.face_found,
        hotkey=frame.hotkey,
        position=[round(float(v), 4) for v in head.position],
        rotation=[round(float(v), 4) for v in head.rotation],
        blendshapes={name: round(weight, 3) for name, weight in strongest[:top]},
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    settings = get_settings()

    level = "DEBUG" if args.verbose else settings.log_level
    init_logging(json_format=settings.log_json, level=level)

    options: dict[str, str] = {}
    phone_ip = args.phone_ip or settings.phone_ip
    if phone_ip:
        options[VTS.OPTION_PHONE_IP] = phone_ip
        bind_peer(phone_ip)
    if args.app_name is not None:
        options[VTS.OPTION_APP_NAME] = args.app_name

    adaptor = create_vts_adaptor(settings)
    try:
        adaptor.start(options)
    except VTSTrackingError as e:
        logger.error("vts_start_failed", **e.to_dict())
        return 1

    if not adaptor.is_running():
        logger.error("vts_not_started", reason="no phone address; pass --phone-ip")
        return 2

    tick_s = 1.0 / max(args.tick_hz, 1.0)
    deadline = time.monotonic() + args.duration if args.duration > 0 else None
    last_timestamp = None

    try:
        while deadline is None or time.monotonic() < deadline:
            adaptor.poll()
            frame = adaptor.last_frame
            if frame is not None and frame.timestamp != last_timestamp:
                last_timestamp = frame.timestamp
                _log_frame(adaptor, args.top)
            time.sleep(tick_s)
    except KeyboardInterrupt:
        logger.info("vts_monitor_interrupted")
    finally:
        adaptor.stop()

    return 0


if __name__ == "__main__":
    sys.exit(main())
