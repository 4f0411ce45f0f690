import abc
import logging
import os
import pickle
from dataclasses import dataclass, field
from typing import Dict, List

import cv2
import numpy as np
from sklearn.neighbors import KNeighborsClassifier
from sklearn.preprocessing import LabelEncoder

from cubeplay.config import CAPTURE_SIZE, COLORS, FACE_ORDER, SAMPLE_SIZE, UNKNOWN_COLOR

logger = logging.getLogger(__name__)


def crop_center_square(frame, size=CAPTURE_SIZE):
    """Cut the centred square out of a camera frame and resize it to `size` px."""
    h, w = frame.shape[:2]
    min_dim = min(h, w)
    y0 = (h - min_dim) // 2
    x0 = (w - min_dim) // 2
    square = frame[y0:y0 + min_dim, x0:x0 + min_dim]
    return cv2.resize(square, (size, size), interpolation=cv2.INTER_AREA)


def grid_points(size=CAPTURE_SIZE):
    cell = size / 3
    return [(int(col * cell + cell / 2), int(row * cell + cell / 2))
            for row in range(3) for col in range(3)]


def mean_color(img, point, sample_size=SAMPLE_SIZE):
    """Mean BGR value of the `sample_size` square centred on `point`."""
    h, w = img.shape[:2]
    x, y = int(point[0]), int(point[1])
    half = sample_size // 2
    box = img[max(0, y - half):min(h, y + half), max(0, x - half):min(w, x + half)]
    if box.size == 0:
        raise ValueError(f'sample point {point} outside image of shape {img.shape}')
    return box.reshape(-1, box.shape[-1]).mean(axis=0)


class ColorClassifier(object, metaclass=abc.ABCMeta):
    def __init__(self, SAMPLE_SIZE=SAMPLE_SIZE):
        self.SAMPLE_SIZE = SAMPLE_SIZE

    @abc.abstractmethod
    def predict(self, bgr):
        raise NotImplementedError()

    def estimate_colors(self, img, points):
        return [self.predict(mean_color(img, p, self.SAMPLE_SIZE)) for p in points]

    def classify_face(self, img):
        """Colour names of the 9 cells of a square face capture, row-major."""
        size = min(img.shape[:2])
        return self.estimate_colors(img, grid_points(size))

    def load(self):
        return self


class ThresholdColorClassifier(ColorClassifier):
    def predict(self, bgr):
        b, g, r = (float(v) for v in bgr[:3])
        if r > 150 and g > 150 and b > 150:
            return 'white'
        if r > 150 and g > 150 and b < 100:
            return 'yellow'
        if r > 150 and g < 100 and b < 100:
            return 'red'
        if r > 150 and g < 150 and b < 100:
            return 'orange'
        if g > 100 and r < 100 and b < 100:
            return 'green'
        if b > 100 and r < 100 and g < 100:
            return 'blue'
        return UNKNOWN_COLOR


class KnnColorClassifier(ColorClassifier):
    def __init__(self, n_neighbors=3, threshold=.65, SAMPLE_SIZE=SAMPLE_SIZE):
        super().__init__(SAMPLE_SIZE=SAMPLE_SIZE)
        self.le = None
        self.clf = None
        self.n_neighbors = n_neighbors
        self.threshold = threshold

    def bgr2clf_format(self, bgr):
        pixels = np.clip(np.asarray(bgr, dtype=float), 0, 255).astype(np.uint8).reshape(1, -1, 3)
        # drop the lightness channel, it mostly tracks the lighting
        return cv2.cvtColor(pixels, cv2.COLOR_BGR2LAB)[0, :, 1:].astype(float)

    def train_classifier(self, samples: Dict[str, List]):
        X = []
        y = []
        for color, color_samples in samples.items():
            X.extend(self.bgr2clf_format(color_samples))
            y.extend([color] * len(color_samples))

        le = LabelEncoder()
        y_encoded = le.fit_transform(y)
        clf = KNeighborsClassifier(n_neighbors=min(self.n_neighbors, len(X)))
        clf.fit(X, y_encoded)
        self.clf = clf
        self.le = le
        return self

    def save_classifier(self, model_path=None):
        model_path = model_path or os.path.join(os.path.dirname(__file__), 'weights', 'color_classifier.pkl')
        os.makedirs(os.path.dirname(model_path), exist_ok=True)
        with open(model_path, 'wb') as f:
            pickle.dump((self.clf, self.le), f)

    def load(self, model_path=None):
        model_path = model_path or os.path.join(os.path.dirname(__file__), 'weights', 'color_classifier.pkl')
        with open(model_path, 'rb') as f:
            clf, le = pickle.load(f)
            self.clf = clf
            self.le = le
        return self

    def predict(self, bgr):
        if self.clf is None:
            raise RuntimeError('train or load the classifier first')
        proba = self.clf.predict_proba(self.bgr2clf_format([bgr]))[0]
        if np.max(proba) < self.threshold:
            return UNKNOWN_COLOR
        return self.le.inverse_transform([self.clf.classes_[int(np.argmax(proba))]])[0]


@dataclass
class ScanResult:
    """Colours of the captured faces, filled in capture order U R F D L B."""
    faces: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def next_face(self):
        missing = self.missing_faces
        return missing[0] if missing else None

    @property
    def missing_faces(self):
        return [face for face in FACE_ORDER if face not in self.faces]

    @property
    def is_complete(self):
        return not self.missing_faces

    def add_face(self, face, colors):
        if face not in FACE_ORDER:
            raise ValueError(f'unknown face {face!r}')
        if len(colors) != 9:
            raise ValueError(f'face {face} needs 9 colours, got {len(colors)}')
        self.faces[face] = list(colors)
        unknown = sum(1 for c in colors if c not in COLORS)
        if unknown:
            logger.warning('[ScanResult] face %s has %d unrecognised cells', face, unknown)

    def capture(self, classifier: ColorClassifier, img, face=None):
        face = face or self.next_face
        if face is None:
            raise ValueError('all faces already captured')
        self.add_face(face, classifier.classify_face(img))
        return face

    def color_to_face(self):
        mapping = {}
        for face, colors in self.faces.items():
            center = colors[4]
            if center in COLORS and center not in mapping:
                mapping[center] = face
        return mapping

    def to_facelet_string(self):
        """Facelet string with each colour replaced by the face whose centre shows it.

        Cells that cannot be mapped become '?', which the codec rejects.
        """
        if not self.is_complete:
            raise ValueError(f'missing faces {self.missing_faces}')
        mapping = self.color_to_face()
        return ''.join(mapping.get(color, '?') for face in FACE_ORDER for color in self.faces[face])
