import argparse
import logging

import cv2

from cubeplay.color_classifier import ScanResult, ThresholdColorClassifier, crop_center_square
from cubeplay.config import CAMERA_INDEX, CAPTURE_SIZE
from cubeplay.cube_solver import CubeEngine
from cubeplay.errors import MalformedFaceletString
from cubeplay.moves import describe
from cubeplay.plotting import blank_canvas, draw_net, draw_scan_grid, draw_text

logger = logging.getLogger("main")

# keyboard -> move, shifted letter turns the other way
MOVE_KEYS = {ch: ch.upper() for ch in 'udlrfbmes'}
MOVE_KEYS.update({ch.upper(): ch.upper() + "'" for ch in 'udlrfbmes'})
MOVE_KEYS.update({'x': 'x', 'y': 'y', 'z': 'z', 'X': "x'", 'Y': "y'", 'Z': "z'"})


def scan_view(frame, engine, scan):
    """Clean centre crop for the classifier and a copy of it with the overlays drawn."""
    capture = crop_center_square(frame, CAPTURE_SIZE)
    image = capture.copy()
    draw_scan_grid(image)
    draw_net(image, engine.get_facelet_string())
    if scan.next_face:
        draw_text(image, f'scan {scan.next_face} (space)')
    return capture, image


def run(video_stream=None, facelets=None):
    engine = CubeEngine()
    classifier = ThresholdColorClassifier()
    scan = ScanResult()
    cap = cv2.VideoCapture(video_stream) if video_stream is not None else None

    @engine.scheduler.on_move_done
    def log_move(token):
        logger.info('done %s (%s)', token, describe(token))

    if facelets:
        try:
            engine.load_facelets(facelets)
        except MalformedFaceletString as e:
            logger.error("ignoring start state: %s", e)

    while True:
        if cap is not None:
            ret, frame = cap.read()
            if not ret:
                logger.error('could not read from camera %s', video_stream)
                break
            engine.tick()
            capture, image = scan_view(frame, engine, scan)
        else:
            engine.tick()
            capture, image = None, draw_net(blank_canvas(), engine.get_facelet_string())

        if engine.solution:
            draw_text(image, '[solution] ' + ' '.join(engine.solution), bottom=True)

        cv2.imshow('cube', image)
        key = cv2.waitKey(1) & 0xFF
        if key == 0xFF:
            continue
        ch = chr(key)
        if ch == 'q':
            break
        elif ch == ' ' and cap is not None and scan.next_face:
            face = scan.capture(classifier, capture)
            logger.info('captured %s: %s', face, scan.faces[face])
            if scan.is_complete:
                engine.load_scan(scan)
                scan = ScanResult()
        elif ch == '\r' or ch == '\n':
            engine.play(engine.solve())
        elif ch == '0':
            engine.reset()
            scan = ScanResult()
        elif ch in MOVE_KEYS:
            engine.enqueue(MOVE_KEYS[ch])

    # Clean up
    if cap is not None:
        cap.release()
    cv2.destroyAllWindows()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    parser = argparse.ArgumentParser(description='Scan, turn and solve a virtual cube.')
    parser.add_argument('--camera', type=int, default=CAMERA_INDEX, help='webcam index')
    parser.add_argument('--no-camera', action='store_true', help='play without scanning')
    parser.add_argument('--facelets', help='54 character start state in URFDLB order')
    parser.add_argument('--debug', action='store_true')
    args = parser.parse_args()
    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)
    run(video_stream=None if args.no_camera else args.camera, facelets=args.facelets)
