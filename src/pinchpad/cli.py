"""
PinchPad - pinch-and-drag trackpad emulation from a webcam.

Command line entry point.
"""
import argparse
import logging
import sys
from pathlib import Path

from .config import ConfigError, load_config

logger = logging.getLogger("pinchpad")


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="PinchPad - Pinch-Drag Trackpad From Your Webcam",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: config.yaml)",
    )

    parser.add_argument(
        "--camera",
        type=int,
        default=None,
        help="Camera index (overrides config)",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Run in an OpenCV window with keypoint overlay instead of the Qt UI",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Track gestures but never move the system cursor",
    )

    parser.add_argument(
        "--list-cameras",
        action="store_true",
        help="List detected cameras and exit",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging verbosity (default: INFO)",
    )

    return parser.parse_args(argv)


def list_cameras() -> int:
    """Print the cameras OpenCV can open."""
    from .webcam import list_video_devices

    devices = list_video_devices()
    if not devices:
        print("No cameras found")
        return 1
    for device in devices:
        print(f"  [{device.id}] {device.name}")
    return 0


def run_debug(config) -> int:
    """
    Run with an OpenCV preview window - shows the tracked tips and mode.
    Useful for tuning thresholds before trusting the cursor to it.
    """
    import cv2
    from .cursor import CursorSink
    from .gesture import CursorMoved, GestureEngine
    from .webcam import HandTracker

    tracker = HandTracker(config)
    engine = GestureEngine(config.gestures)
    sink = CursorSink(enabled=config.cursor.enabled)

    def on_event(event):
        if isinstance(event, CursorMoved):
            sink.move_to(event.x, event.y)
        else:
            logger.info("Trackpad %s", "engaged" if event.is_active else "released")

    engine.subscribe(on_event)

    if not tracker.start():
        logger.error("Could not start hand tracking")
        return 1

    logger.info("Debug mode running - press 'q' to quit")

    try:
        while True:
            observation = tracker.get_observation()
            engine.update(observation)

            frame = tracker.get_frame_with_overlay(observation, engine.is_active)
            if frame is not None:
                x, y = engine.cursor_position
                cv2.putText(
                    frame, f"Cursor: ({x:.3f}, {y:.3f})", (10, 60),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 1
                )
                cv2.imshow("PinchPad Debug", frame)

            if cv2.waitKey(1) & 0xFF == ord('q'):
                break
    finally:
        engine.reset()
        tracker.stop()
        cv2.destroyAllWindows()

    return 0


def run_app(config, effects_source=None) -> int:
    """
    Run PinchPad with the Qt overlay and worker thread.

    Args:
        config: Loaded configuration
        effects_source: Optional CameraEffectsSource for the effects panel
    """
    import signal
    import atexit
    from PyQt5.QtWidgets import QApplication
    from PyQt5.QtCore import QThread, Qt
    from .cursor import CursorSink
    from .ui import CursorFeedbackOverlay, MainWindow
    from .webcam import TrackpadWorker, effects_state_or_default, list_video_devices

    app = QApplication(sys.argv)

    window = MainWindow(automatic_selection=config.camera.automatic_selection)
    window.panel.set_devices(list_video_devices(), selected_id=config.camera.device_id)
    window.panel.set_effects_state(effects_state_or_default(effects_source))
    if config.ui.show_preview:
        window.show()

    overlay = CursorFeedbackOverlay()
    if config.ui.show_feedback:
        overlay.show()

    sink = CursorSink(enabled=config.cursor.enabled)

    # Setup background worker and thread
    thread = QThread()
    worker = TrackpadWorker(config)
    worker.moveToThread(thread)

    def cleanup():
        """Ensure camera is released on exit."""
        logger.info("Cleaning up camera resources...")
        worker.stop_process()
        thread.quit()
        thread.wait(2000)

    atexit.register(cleanup)

    def signal_handler(signum, frame):
        """Handle Ctrl+C and kill signals gracefully."""
        logger.info("Received signal %s, shutting down...", signum)
        app.quit()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    def handle_cursor(x, y):
        overlay.set_cursor(x, y)
        sink.move_to(x, y)

    def handle_mode(active, x, y):
        overlay.set_cursor(x, y)
        overlay.set_active(active)
        window.set_status("Trackpad engaged" if active else "Trackpad released")

    def handle_auto_selection(enabled):
        config.camera.automatic_selection = enabled

    # Queued connections keep GUI work on the main thread, in emission order
    thread.started.connect(worker.start_process)
    worker.cursor_moved.connect(handle_cursor, Qt.QueuedConnection)
    worker.mode_changed.connect(handle_mode, Qt.QueuedConnection)
    worker.frame_ready.connect(window.set_frame, Qt.QueuedConnection)
    worker.formats_ready.connect(window.panel.set_formats, Qt.QueuedConnection)
    worker.camera_state_changed.connect(
        lambda state: window.set_status(f"Camera: {state.name.lower()}"), Qt.QueuedConnection
    )
    worker.error.connect(lambda msg: logger.error("Worker error: %s", msg), Qt.QueuedConnection)
    window.panel.device_selected.connect(worker.request_device, Qt.DirectConnection)
    window.panel.format_selected.connect(worker.request_format, Qt.DirectConnection)
    window.panel.automatic_selection_changed.connect(handle_auto_selection)

    thread.start()

    try:
        result = app.exec_()
    finally:
        cleanup()
        atexit.unregister(cleanup)  # Avoid double cleanup

    return result


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.list_cameras:
        return list_cameras()

    try:
        config = load_config(args.config)
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    # Apply CLI overrides
    if args.camera is not None:
        config.camera.device_id = args.camera
    if args.dry_run:
        config.cursor.enabled = False

    logger.info("PinchPad starting (camera %d, %s)",
                config.camera.device_id, "debug" if args.debug else "overlay")

    if args.debug:
        return run_debug(config)
    return run_app(config)
