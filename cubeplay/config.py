"""Default constants for the cube engine, scanner and player.

Classes take these as keyword defaults, so a caller can override any of
them per instance instead of editing this file.
"""
from typing import Dict, List, Tuple

# ---------------- Cube layout ----------------

# Kociemba face order of the 54-character facelet string.
FACE_ORDER: List[str] = ['U', 'R', 'F', 'D', 'L', 'B']
STATE_SOLVED: str = 'UUUUUUUUURRRRRRRRRFFFFFFFFFDDDDDDDDDLLLLLLLLLBBBBBBBBB'

# Sticker slots of a piece, in order. Each slot is the outward normal
# (x -> R, y -> U, z -> F) of the face it belongs to.
SLOT_ORDER: List[str] = ['U', 'D', 'F', 'B', 'L', 'R']
SLOT_NORMALS: Dict[str, Tuple[int, int, int]] = {
    'U': (0, 1, 0),
    'D': (0, -1, 0),
    'F': (0, 0, 1),
    'B': (0, 0, -1),
    'L': (-1, 0, 0),
    'R': (1, 0, 0),
}

# Colour each face shows when solved.
HOME_COLORS: Dict[str, str] = {
    'U': 'white',
    'D': 'yellow',
    'F': 'green',
    'B': 'blue',
    'L': 'orange',
    'R': 'red',
}
COLORS: List[str] = ['white', 'yellow', 'red', 'orange', 'green', 'blue']
UNKNOWN_COLOR: str = 'unknown'

# ---------------- Moves ----------------

# Largest distance from the integer lattice tolerated after snapping.
SNAP_TOLERANCE: float = 1e-6

# Seconds one quarter or half turn takes on screen.
MOVE_DURATION: float = 0.3

# ---------------- Solver ----------------

# Solutions longer than this are not played, the fallback is used instead.
MAX_SOLUTION_MOVES: int = 30

# Short demonstration sequence played whenever scanning or solving fails.
FALLBACK_SEQUENCE: Tuple[str, ...] = ('F', 'R', 'U', "R'")

# ---------------- Capture ----------------

# The centre square of a frame is resized to CAPTURE_SIZE x CAPTURE_SIZE
# and each of the 9 cells is averaged over SAMPLE_SIZE x SAMPLE_SIZE px.
CAPTURE_SIZE: int = 300
SAMPLE_SIZE: int = 20

# Webcam used by the scan-and-play loop.
CAMERA_INDEX: int = 0
