import numpy as np
import pytest

from cubeplay.color_classifier import ScanResult, ThresholdColorClassifier
from cubeplay.cube_solver import CubeEngine
from cubeplay.main import scan_view


@pytest.mark.parametrize('bgr, color', [((180, 50, 0), 'blue'), ((0, 200, 200), 'yellow')])
def test_scan_view_classifies_the_clean_crop(bgr, color):
    frame = np.zeros((480, 640, 3), dtype=np.uint8)
    frame[:] = bgr
    scan = ScanResult()
    capture, image = scan_view(frame, CubeEngine(), scan)

    # the overlays land on the display copy only
    assert capture.shape == image.shape == (300, 300, 3)
    assert not np.array_equal(capture, image)
    assert (capture == np.array(bgr, dtype=np.uint8)).all()

    assert scan.capture(ThresholdColorClassifier(), capture, face='B') == 'B'
    assert scan.faces['B'] == [color] * 9
