"""
GestEasy - Hand gesture cursor and navigation

Entry point for the camera debug loop and offline replay.
"""
import argparse
import json
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))

FEEDBACK_MESSAGES = {
    "CLICK": "Click gesture detected!",
    "CONFIRM_NAVIGATE": "V gesture detected! Navigating to settings...",
}


def parse_size(value):
    """Parse 'WIDTHxHEIGHT' into a tuple of ints."""
    try:
        width, height = (int(v) for v in value.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected WIDTHxHEIGHT, got {value!r}")
    return (width, height)


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="GestEasy - Hand gesture cursor and navigation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: config.yaml)",
    )

    parser.add_argument(
        "--replay",
        type=Path,
        default=None,
        help="Replay a JSON lines file of landmark frames instead of the camera",
    )

    parser.add_argument(
        "--output-size",
        type=parse_size,
        default=None,
        help="Output surface size as WIDTHxHEIGHT (overrides config)",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    return parser.parse_args(argv)


def run_replay(config, replay_path):
    """
    Feed recorded frames through the pipeline.

    Each line is a JSON object: {"t": seconds, "landmarks": [[x, y, z], ...] | null}.
    Frames with "active": false switch gesture mode off until the next
    frame with "active": true.
    """
    from gesteasy import GesturePipeline, GestureEvent

    clock_time = [0.0]
    pipeline = GesturePipeline(config, clock=lambda: clock_time[0])
    pipeline.enable()

    events = []
    with open(replay_path, "r") as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            record = json.loads(line)
            if not isinstance(record, dict):
                print(f"[{line_no:5d}] skipped: expected a JSON object, got {type(record).__name__}")
                continue
            clock_time[0] = float(record.get("t", clock_time[0]))

            active = record.get("active", True)
            if active and not pipeline.active:
                pipeline.enable()
            elif not active and pipeline.active:
                pipeline.disable()

            result = pipeline.process_frame(record.get("landmarks"))
            if result.event is not GestureEvent.NONE:
                events.append((line_no, result.event))
                print(f"[{line_no:5d}] t={clock_time[0]:.3f} {FEEDBACK_MESSAGES[result.event.name]}")

    print(f"Replay finished: {len(events)} event(s)")
    return 0


def run_camera(config):
    """
    Run the camera loop with a preview window.
    'g' toggles gesture mode, a mouse click in the window pauses gestures
    briefly, 'q' quits.
    """
    import cv2
    from gesteasy import GesturePipeline, GestureEvent
    from gesteasy.hand_tracker import HandTracker

    tracker = HandTracker(config)
    pipeline = GesturePipeline(config)
    window = "GestEasy Debug"

    print("Starting camera mode...")
    print("Press 'g' to toggle gesture mode, 'q' to quit")
    print("-" * 40)

    if not tracker.start():
        print("ERROR: Could not start hand tracker")
        return 1

    def on_mouse(event, x, y, flags, param):
        if event == cv2.EVENT_LBUTTONDOWN:
            pipeline.notify_pointer_click()

    cv2.namedWindow(window)
    cv2.setMouseCallback(window, on_mouse)

    message = ""
    landmarks = None
    try:
        while True:
            frame = tracker.read()
            if frame is None:
                break

            def detect(f):
                nonlocal landmarks
                landmarks = tracker.detect(f)
                return landmarks

            landmarks = None
            result = pipeline.step(frame, detect)
            if result.event is not GestureEvent.NONE:
                message = FEEDBACK_MESSAGES[result.event.name]
                print(f"[{tracker.frame_count:5d}] {message}")

            preview = tracker.get_frame_with_landmarks(
                landmarks, pipeline.last_cursor, config.cursor.output_size
            )
            if preview is not None:
                mode = "ON" if pipeline.active else "OFF"
                cv2.putText(preview, f"Gesture mode: {mode}", (10, 30),
                            cv2.FONT_HERSHEY_SIMPLEX, 0.8, (0, 255, 0), 2)
                if result.match is not None:
                    cv2.putText(preview, f"Match: {result.match.name}", (10, 60),
                                cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 1)
                if message:
                    cv2.putText(preview, message, (10, 90),
                                cv2.FONT_HERSHEY_SIMPLEX, 0.6, (0, 255, 255), 1)
                cv2.imshow(window, preview)

            key = cv2.waitKey(1) & 0xFF
            if key == ord('q'):
                break
            if key == ord('g'):
                pipeline.toggle()
                message = ""

    finally:
        tracker.stop()
        cv2.destroyAllWindows()

    return 0


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    from gesteasy import ConfigError, load_config, setup_logging
    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"ERROR: Invalid configuration: {e}")
        return 2

    # Apply CLI overrides
    if args.output_size:
        config.cursor.output_size = args.output_size
    if args.debug:
        config.logging.debug = True

    setup_logging(debug=config.logging.debug, log_file=config.logging.log_file)

    print("GestEasy starting...")
    print(f"  Mode: {'replay' if args.replay else 'camera'}")
    print(f"  Output size: {config.cursor.output_size[0]}x{config.cursor.output_size[1]}")
    print(f"  Debug: {config.logging.debug}")
    print()

    if args.replay:
        return run_replay(config, args.replay)
    return run_camera(config)


if __name__ == "__main__":
    sys.exit(main())
