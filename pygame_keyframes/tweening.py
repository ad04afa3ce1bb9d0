"""Interpolation between two keyframe values.

Numbers, sequences, ``pygame.Color``, pygame vectors, mappings and strings
with embedded numbers are tweened. Anything else steps from the start value
to the end value at the halfway point.
"""
import re
from typing import Any, List, Mapping

import pygame

from pygame_keyframes.easing import EasingSpec, get_easing_function

NUMBER_PATTERN = re.compile(r"-?\d*\.?\d+(?:[eE][-+]?\d+)?")
HEX_COLOR_PATTERN = re.compile(r"#([0-9a-fA-F]{6}|[0-9a-fA-F]{3})\b")
RGB_PATTERN = re.compile(r"rgb\(([^)]*)\)")

NUMBER_PRECISION = 6


def interpolate(start: Any, end: Any, position: float, easing: EasingSpec = None) -> Any:
    """Tween from ``start`` to ``end`` at ``position`` (0..1) along ``easing``"""
    eased = get_easing_function(easing)(position)
    return interpolate_eased(start, end, eased)


def interpolate_eased(start: Any, end: Any, eased: float) -> Any:
    """Tween with an already-eased progress ratio"""
    if isinstance(start, bool) or isinstance(end, bool):
        return _step(start, end, eased)

    if isinstance(start, (int, float)) and isinstance(end, (int, float)):
        return _interpolate_numeric(start, end, eased)
    elif isinstance(start, pygame.Color) and isinstance(end, pygame.Color):
        return _interpolate_color(start, end, eased)
    elif (isinstance(start, (pygame.math.Vector2, pygame.math.Vector3))
          and type(start) is type(end)):
        return start + (end - start) * eased
    elif isinstance(start, (list, tuple)) and isinstance(end, (list, tuple)):
        return _interpolate_vector(start, end, eased)
    elif isinstance(start, Mapping) and isinstance(end, Mapping):
        return {key: interpolate_eased(value, end[key], eased) if key in end else value
                for key, value in start.items()}
    elif isinstance(start, str) and isinstance(end, str):
        return _interpolate_string(start, end, eased)
    else:
        return _step(start, end, eased)


def _step(start: Any, end: Any, eased: float) -> Any:
    return start if eased < 0.5 else end


def _interpolate_numeric(start: float, end: float, eased: float) -> float:
    return start + (end - start) * eased


def _interpolate_vector(start, end, eased: float):
    result = [interpolate_eased(a, b, eased) for a, b in zip(start, end)]
    if isinstance(start, tuple):
        return tuple(result)
    return result


def _interpolate_color(start: pygame.Color, end: pygame.Color, eased: float) -> pygame.Color:
    r = int(start.r + (end.r - start.r) * eased)
    g = int(start.g + (end.g - start.g) * eased)
    b = int(start.b + (end.b - start.b) * eased)
    a = int(start.a + (end.a - start.a) * eased)

    return pygame.Color(max(0, min(255, r)), max(0, min(255, g)),
                        max(0, min(255, b)), max(0, min(255, a)))


def hex_to_rgb_string(hex_color: str) -> str:
    """'#f80' or '#ff8800' -> 'rgb(255,136,0)'"""
    digits = hex_color.lstrip("#")
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    color = pygame.Color("#" + digits)
    return f"rgb({color.r},{color.g},{color.b})"


def normalize_colors(value: str) -> str:
    return HEX_COLOR_PATTERN.sub(lambda match: hex_to_rgb_string(match.group(0)), value)


def format_number(value: float) -> str:
    if value == int(value):
        return str(int(value))
    return (f"%.{NUMBER_PRECISION}f" % value).rstrip("0").rstrip(".")


def _truncate_rgb_channels(match) -> str:
    channels = [str(max(0, min(255, int(float(chunk)))))
                for chunk in NUMBER_PATTERN.findall(match.group(1))]
    return f"rgb({','.join(channels)})"


def _interpolate_string(start: str, end: str, eased: float) -> str:
    start = normalize_colors(start)
    end = normalize_colors(end)

    start_numbers = NUMBER_PATTERN.findall(start)
    end_numbers = NUMBER_PATTERN.findall(end)
    if not start_numbers or len(start_numbers) != len(end_numbers):
        return _step(start, end, eased)

    # The start string's formatting is kept, its numbers are replaced
    chunks: List[str] = NUMBER_PATTERN.split(start)
    values = [_interpolate_numeric(float(a), float(b), eased)
              for a, b in zip(start_numbers, end_numbers)]

    pieces = [chunks[0]]
    for value, chunk in zip(values, chunks[1:]):
        pieces.append(format_number(value))
        pieces.append(chunk)

    return RGB_PATTERN.sub(_truncate_rgb_channels, "".join(pieces))
