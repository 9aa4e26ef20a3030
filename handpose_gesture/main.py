"""
Live hand pose gesture classifier.

Pipeline:
    Camera -> CaptureSession thread -> FrameDispatcher
        -> HandPoseEstimator -> KeypointEncoder -> GestureClassifier
        -> ResultPresenter -> OpenCV window

Press 'q' in the window to quit.
"""

import argparse
import dataclasses
import logging
import sys
import threading
import time
from typing import List, Optional

import cv2
import numpy as np

from .camera_module import Camera, CaptureSession
from .config import AppConfig, load_config
from .dispatcher import FrameDispatcher
from .exceptions import CameraError, ModelLoadFailure, PermissionDenied
from .gesture_classifier import GestureClassifier
from .hand_pose import HandPoseEstimator
from .permissions import CameraPermissionGate
from .presenter import ResultPresenter

logger = logging.getLogger(__name__)

MODEL_UNAVAILABLE_MESSAGE = "model unavailable"


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Live hand pose gesture classifier")
    parser.add_argument("--config", help="JSON config file")
    parser.add_argument("--model", help="Path to trained Keras model")
    parser.add_argument("--class-map", help="JSON class map {label: index}")
    parser.add_argument("--camera", type=int, help="Camera index")
    parser.add_argument("--preset", help="Resolution preset (low, medium, high, hd1920x1080)")
    parser.add_argument("--no-mirror", action="store_true", help="Do not mirror the preview")
    parser.add_argument(
        "--silent-failures",
        action="store_true",
        help="Drop failed frames without showing 'unavailable'",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    return parser


def apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """Return a copy of config with command line values applied."""
    camera_changes = {}
    if args.camera is not None:
        camera_changes["camera_index"] = args.camera
    if args.preset:
        camera_changes["resolution_preset"] = args.preset
    if args.no_mirror:
        camera_changes["mirror"] = False

    classifier_changes = {}
    if args.model:
        classifier_changes["model_path"] = args.model
    if args.class_map:
        classifier_changes["class_map_path"] = args.class_map

    changes = {
        "camera": dataclasses.replace(config.camera, **camera_changes),
        "classifier": dataclasses.replace(config.classifier, **classifier_changes),
    }
    if args.silent_failures:
        changes["report_failures"] = False

    return dataclasses.replace(config, **changes)


def load_classifier(config: AppConfig, presenter: ResultPresenter) -> Optional[GestureClassifier]:
    """Load the model, falling back to an 'unavailable' message on failure."""
    try:
        classifier = GestureClassifier.from_config(config.classifier)
    except ModelLoadFailure as e:
        logger.error("[App] %s", e)
        presenter.show_unavailable(ModelLoadFailure(MODEL_UNAVAILABLE_MESSAGE))
        return None

    logger.info("[App] Model ready: %s", classifier.get_model_info())
    return classifier


def _show_blocking_message(
    window_name: str, presenter: ResultPresenter, background: Optional[np.ndarray] = None
) -> None:
    canvas = background if background is not None else np.zeros((240, 960, 3), dtype=np.uint8)
    cv2.imshow(window_name, presenter.draw(canvas))
    cv2.waitKey(0)
    cv2.destroyAllWindows()


def _fail_startup(config: AppConfig, presenter: ResultPresenter, error: Exception) -> int:
    logger.error("[App] %s", error)
    presenter.show_unavailable(error)
    _show_blocking_message(config.window_name, presenter)
    return 1


def run(config: AppConfig) -> int:
    """
    Run the live classifier until 'q' is pressed.

    Returns:
        Process exit code
    """
    presenter = ResultPresenter(prefix=config.result_prefix)

    gate = CameraPermissionGate.from_setting(config.camera_authorization)
    try:
        gate.ensure_authorized()
    except PermissionDenied as e:
        logger.error("[App] %s", e)
        presenter.show_permission_required(e.directive)
        _show_blocking_message(config.window_name, presenter)
        return 2

    classifier = load_classifier(config, presenter)

    # Without a model the preview runs alone; no estimator needed
    estimator: Optional[HandPoseEstimator] = None
    if classifier is not None:
        try:
            estimator = HandPoseEstimator(
                max_num_hands=config.max_num_hands,
                min_detection_confidence=config.min_detection_confidence,
                min_tracking_confidence=config.min_tracking_confidence,
                coordinate_origin=config.coordinate_origin,
                tasks_model_path=config.tasks_model_path,
            )
        except (RuntimeError, OSError) as e:
            return _fail_startup(config, presenter, e)

    try:
        camera = Camera(config.camera)
    except CameraError as e:
        if estimator is not None:
            estimator.close()
        return _fail_startup(config, presenter, e)

    dispatcher: Optional[FrameDispatcher] = None
    if classifier is not None:
        dispatcher = FrameDispatcher(
            estimator=estimator,
            classifier=classifier,
            presenter=presenter,
            report_failures=config.report_failures,
        )

    preview_lock = threading.Lock()
    preview: List[Optional[np.ndarray]] = [None]

    def on_frame(frame: np.ndarray) -> None:
        with preview_lock:
            preview[0] = frame
        if dispatcher is not None:
            dispatcher.submit(frame)

    def on_camera_error(error: Exception) -> None:
        # Losing the camera ends the session, so it is always shown
        presenter.show_unavailable(error)

    session = CaptureSession(camera, on_frame=on_frame, on_error=on_camera_error)

    if dispatcher is not None:
        dispatcher.start()
    session.start()

    exit_code = 0
    logger.info("[App] Press 'q' in the window to quit.")
    try:
        while True:
            presenter.drain()

            with preview_lock:
                frame = preview[0]

            if frame is not None:
                cv2.imshow(config.window_name, presenter.draw(frame))

            key = cv2.waitKey(1) & 0xFF
            if key == ord("q"):
                logger.info("[App] 'q' pressed, exiting.")
                break

            if not session.is_running:
                logger.error("[App] Capture session ended")
                # The error update may have been posted after the drain above
                presenter.drain()
                _show_blocking_message(config.window_name, presenter, frame)
                exit_code = 1
                break

            if frame is None:
                time.sleep(0.01)
    finally:
        session.stop()
        if dispatcher is not None:
            dispatcher.stop()
            logger.info(
                "[App] Frames processed: %d, dropped: %d, failed: %d",
                dispatcher.processed_frames,
                dispatcher.dropped_frames,
                dispatcher.failed_frames,
            )
        if estimator is not None:
            estimator.close()
        camera.stop()
        cv2.destroyAllWindows()

    return exit_code


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = apply_overrides(load_config(args.config), args)
    except ValueError as e:
        logger.error("[App] Invalid configuration: %s", e)
        return 2

    return run(config)


if __name__ == "__main__":
    sys.exit(main())
