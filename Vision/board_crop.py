# Vision/board_crop.py
import cv2
import numpy as np
from typing import List, Tuple

Rect = Tuple[int, int, int, int]  # x, y, w, h

CANNY_LOW = 50
CANNY_HIGH = 50
DILATE_KERNEL = (5, 5)
DILATE_ITERATIONS = 2


def load_board_image(image_path: str) -> np.ndarray:
    """Read a board screenshot as BGR."""
    bgr = cv2.imread(image_path, cv2.IMREAD_COLOR)
    if bgr is None:
        raise FileNotFoundError(f"Could not read image: {image_path}")
    return bgr


def _to_gray(img: np.ndarray) -> np.ndarray:
    if img.ndim == 2:
        return img
    if img.shape[2] == 4:
        return cv2.cvtColor(img, cv2.COLOR_BGRA2GRAY)
    return cv2.cvtColor(img, cv2.COLOR_BGR2GRAY)


def find_board_contours(img: np.ndarray) -> List[np.ndarray]:
    """
    Edge contours of everything drawn on the board:
      - Canny edges on the grayscale image
      - dilation to close gaps in thin grid lines
      - every contour (RETR_LIST), not just the outer ones
    """
    gray = _to_gray(img)
    edges = cv2.Canny(gray, CANNY_LOW, CANNY_HIGH)
    kernel = cv2.getStructuringElement(cv2.MORPH_RECT, DILATE_KERNEL)
    dilated = cv2.dilate(edges, kernel, iterations=DILATE_ITERATIONS)
    contours, _ = cv2.findContours(dilated, cv2.RETR_LIST, cv2.CHAIN_APPROX_SIMPLE)
    return list(contours)


def calc_board_rectangle(contours: List[np.ndarray]) -> Rect:
    """Union of the bounding boxes of all contours."""
    if not contours:
        raise ValueError("No contours detected; is the board visible?")

    min_x = min_y = np.inf
    max_x = max_y = -np.inf
    for c in contours:
        x, y, w, h = cv2.boundingRect(c)
        min_x = min(min_x, x)
        min_y = min(min_y, y)
        max_x = max(max_x, x + w)
        max_y = max(max_y, y + h)

    return int(min_x), int(min_y), int(max_x - min_x), int(max_y - min_y)


def locate_board(img: np.ndarray) -> Rect:
    """Board rectangle (x, y, w, h) in image coordinates."""
    return calc_board_rectangle(find_board_contours(img))
