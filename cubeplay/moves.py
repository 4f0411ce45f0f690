from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from cubeplay.errors import InvalidMoveToken

# letter -> (axis, layer, sign of the canonical quarter turn)
# sign follows the right-hand rule about the positive axis; layer None is the whole cube
MOVE_TABLE = {
    'U': ('y', 1, -1),
    'D': ('y', -1, 1),
    'R': ('x', 1, -1),
    'L': ('x', -1, 1),
    'F': ('z', 1, -1),
    'B': ('z', -1, 1),
    'M': ('x', 0, 1),
    'E': ('y', 0, 1),
    'S': ('z', 0, -1),
    'x': ('x', None, -1),
    'y': ('y', None, -1),
    'z': ('z', None, -1),
}
MODIFIERS = {'', "'", '2'}
AXIS_INDEX = {'x': 0, 'y': 1, 'z': 2}

SIDE_NAMES = {'U': 'Top', 'D': 'Bottom', 'F': 'Front', 'B': 'Back', 'L': 'Left', 'R': 'Right',
              'M': 'Middle', 'E': 'Equator', 'S': 'Standing'}


@dataclass(frozen=True)
class Move:
    token: str
    axis: str
    angle_sign: int
    angle_multiplier: int
    layer: Optional[int]

    @property
    def angle(self):
        """Signed rotation in degrees about the positive `axis`."""
        return self.angle_sign * self.angle_multiplier * 90

    @property
    def axis_vector(self):
        vec = np.zeros(3)
        vec[AXIS_INDEX[self.axis]] = 1.
        return vec

    @property
    def is_rotation(self):
        return self.layer is None

    def selects(self, position):
        if self.layer is None:
            return True
        return int(np.rint(position[AXIS_INDEX[self.axis]])) == self.layer


def parse(token: str) -> Move:
    if not isinstance(token, str) or not 1 <= len(token) <= 2:
        raise InvalidMoveToken(f'bad move token {token!r}')
    letter, modifier = token[0], token[1:]
    if letter not in MOVE_TABLE:
        raise InvalidMoveToken(f'unknown move {letter!r} in {token!r}')
    if modifier not in MODIFIERS:
        raise InvalidMoveToken(f'unknown modifier {modifier!r} in {token!r}')

    axis, layer, sign = MOVE_TABLE[letter]
    if modifier == "'":
        sign = -sign
    multiplier = 2 if modifier == '2' else 1
    return Move(token=token, axis=axis, angle_sign=sign, angle_multiplier=multiplier, layer=layer)


def parse_sequence(text) -> List[Move]:
    """Parse a whitespace separated sequence, failing on the first bad token."""
    tokens = text.split() if isinstance(text, str) else list(text)
    return [parse(token) for token in tokens]


def invert(token):
    parse(token)
    if token.endswith('2'):
        return token
    if token.endswith("'"):
        return token[0]
    return token + "'"


def expand_half_turns(tokens):
    return [t for token in tokens for t in ([token[0]] * 2 if token.endswith('2') else [token])]


def describe(token):
    """Short instruction for one move, e.g. "Turn the Right side Up!"."""
    move = parse(token)
    letter = token[0]
    if move.is_rotation:
        rotation = {'x': 'up', 'y': 'to the left', 'z': 'to the right'}[letter]
        text = f'Roll the whole cube {rotation}'
        if move.angle_multiplier == 2:
            return text + ' twice!'
        return text + (' the other way!' if token.endswith("'") else '!')

    name = SIDE_NAMES[letter]
    if move.angle_multiplier == 2:
        return f'Turn the {name} side twice!'
    clockwise = not token.endswith("'")
    if letter in ('R', 'L', 'M'):
        up = clockwise == (letter == 'R')
        return f'Turn the {name} side {"Up" if up else "Down"}!'
    if letter in ('U', 'D', 'E'):
        left = clockwise == (letter == 'U')
        return f'Turn the {name} side {"Left" if left else "Right"}!'
    return f'Turn the {name} side {"clockwise" if clockwise else "counter-clockwise"}!'
