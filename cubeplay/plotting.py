import cv2
import numpy as np
import webcolors

from cubeplay.config import FACE_ORDER
from cubeplay.color_classifier import grid_points
from cubeplay.cube_state import facelet_colors

GREY = (128, 128, 128)

# column, row of each face in the unfolded cube
NET_LAYOUT = {
    'U': (1, 0),
    'L': (0, 1),
    'F': (1, 1),
    'R': (2, 1),
    'B': (3, 1),
    'D': (1, 2),
}


def color_bgr(name):
    """BGR tuple of a CSS colour name, grey when the name is not a colour."""
    try:
        red, green, blue = webcolors.name_to_rgb(name)
    except ValueError:
        return GREY
    return (blue, green, red)


def draw_net(image, facelets, cube_size=45, start_x=0, start_y=0):
    """
    Draw the unfolded cube in the top left corner of `image`.

                 | U |
             | L | F | R | B |
                 | D |
    """
    cell = cube_size // 3
    for n, name in enumerate(facelet_colors(facelets)):
        col, row = NET_LAYOUT[FACE_ORDER[n // 9]]
        cell_row, cell_col = divmod(n % 9, 3)
        x0 = start_x + col * cube_size + cell_col * cell
        y0 = start_y + row * cube_size + cell_row * cell
        cv2.rectangle(image, (x0, y0), (x0 + cell, y0 + cell), color_bgr(name), -1)
        cv2.rectangle(image, (x0, y0), (x0 + cell, y0 + cell), (0, 0, 0), 1)

    for col, row in NET_LAYOUT.values():
        x0, y0 = start_x + col * cube_size, start_y + row * cube_size
        cv2.rectangle(image, (x0, y0), (x0 + 3 * cell, y0 + 3 * cell), (0, 0, 0), 2)
    return image


def draw_scan_grid(image, colors=None, sample_size=20):
    """Outline the 9 sample boxes of a square capture, filled with the colours read so far."""
    size = min(image.shape[:2])
    half = sample_size // 2
    for n, (x, y) in enumerate(grid_points(size)):
        if colors is not None and n < len(colors):
            cv2.rectangle(image, (x - half, y - half), (x + half, y + half), color_bgr(colors[n]), -1)
        cv2.rectangle(image, (x - half, y - half), (x + half, y + half), (255, 255, 255), 2)
    return image


def draw_text(image, text, bottom=False, color=(0, 255, 0), font_scale=0.5, thickness=1):
    font = cv2.FONT_HERSHEY_SIMPLEX
    height, width = image.shape[:2]
    text_size = cv2.getTextSize(text, font, font_scale, thickness)[0]
    text_x = max(0, (width - text_size[0]) // 2)
    text_y = height - 10 if bottom else 30
    cv2.putText(image, text, (text_x, text_y), font, font_scale, color, thickness, cv2.LINE_AA)
    return image


def blank_canvas(width=640, height=480):
    return np.full((height, width, 3), 32, dtype=np.uint8)
