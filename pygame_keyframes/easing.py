"""Easing curves for keyframe interpolation.

Every curve maps a progress ratio in ``[0, 1]`` to an eased ratio. Curves are
looked up by name (Robert Penner's naming, plus a few short aliases) or
passed around directly as callables.
"""
import math
from typing import Callable, Dict, Iterable, Mapping, Union

EasingFunction = Callable[[float], float]
EasingSpec = Union[str, EasingFunction, None]

DEFAULT_EASING = "linear"

# Overshoot constants for the "back" family
BACK_C1 = 1.70158
BACK_C2 = BACK_C1 * 1.525
BACK_C3 = BACK_C1 + 1

ELASTIC_C4 = (2 * math.pi) / 3
ELASTIC_C5 = (2 * math.pi) / 4.5

BEZIER_EPSILON = 1e-6
BEZIER_NEWTON_ITERATIONS = 8
BEZIER_BISECTION_ITERATIONS = 40


def linear(t: float) -> float:
    return t


def ease_in_quad(t: float) -> float:
    return t * t


def ease_out_quad(t: float) -> float:
    return 1 - (1 - t) * (1 - t)


def ease_in_out_quad(t: float) -> float:
    if t < 0.5:
        return 2 * t * t
    return 1 - ((-2 * t + 2) ** 2) / 2


def ease_in_cubic(t: float) -> float:
    return t * t * t


def ease_out_cubic(t: float) -> float:
    return 1 - (1 - t) ** 3


def ease_in_out_cubic(t: float) -> float:
    if t < 0.5:
        return 4 * t * t * t
    return 1 - ((-2 * t + 2) ** 3) / 2


def ease_in_quart(t: float) -> float:
    return t ** 4


def ease_out_quart(t: float) -> float:
    return 1 - (1 - t) ** 4


def ease_in_out_quart(t: float) -> float:
    if t < 0.5:
        return 8 * t ** 4
    return 1 - ((-2 * t + 2) ** 4) / 2


def ease_in_quint(t: float) -> float:
    return t ** 5


def ease_out_quint(t: float) -> float:
    return 1 - (1 - t) ** 5


def ease_in_out_quint(t: float) -> float:
    if t < 0.5:
        return 16 * t ** 5
    return 1 - ((-2 * t + 2) ** 5) / 2


def ease_in_sine(t: float) -> float:
    return 1 - math.cos((t * math.pi) / 2)


def ease_out_sine(t: float) -> float:
    return math.sin((t * math.pi) / 2)


def ease_in_out_sine(t: float) -> float:
    return -(math.cos(math.pi * t) - 1) / 2


def ease_in_expo(t: float) -> float:
    if t == 0:
        return 0.0
    return 2 ** (10 * t - 10)


def ease_out_expo(t: float) -> float:
    if t == 1:
        return 1.0
    return 1 - 2 ** (-10 * t)


def ease_in_out_expo(t: float) -> float:
    if t == 0 or t == 1:
        return float(t)
    if t < 0.5:
        return 2 ** (20 * t - 10) / 2
    return (2 - 2 ** (-20 * t + 10)) / 2


def ease_in_circ(t: float) -> float:
    return 1 - math.sqrt(max(0.0, 1 - t * t))


def ease_out_circ(t: float) -> float:
    return math.sqrt(max(0.0, 1 - (t - 1) ** 2))


def ease_in_out_circ(t: float) -> float:
    if t < 0.5:
        return (1 - math.sqrt(max(0.0, 1 - (2 * t) ** 2))) / 2
    return (math.sqrt(max(0.0, 1 - (-2 * t + 2) ** 2)) + 1) / 2


def ease_in_back(t: float) -> float:
    return BACK_C3 * t ** 3 - BACK_C1 * t * t


def ease_out_back(t: float) -> float:
    return 1 + BACK_C3 * (t - 1) ** 3 + BACK_C1 * (t - 1) ** 2


def ease_in_out_back(t: float) -> float:
    if t < 0.5:
        return ((2 * t) ** 2 * ((BACK_C2 + 1) * 2 * t - BACK_C2)) / 2
    return ((2 * t - 2) ** 2 * ((BACK_C2 + 1) * (t * 2 - 2) + BACK_C2) + 2) / 2


def ease_out_bounce(t: float) -> float:
    n1 = 7.5625
    d1 = 2.75
    if t < 1 / d1:
        return n1 * t * t
    if t < 2 / d1:
        t -= 1.5 / d1
        return n1 * t * t + 0.75
    if t < 2.5 / d1:
        t -= 2.25 / d1
        return n1 * t * t + 0.9375
    t -= 2.625 / d1
    return n1 * t * t + 0.984375


def ease_in_bounce(t: float) -> float:
    return 1 - ease_out_bounce(1 - t)


def ease_in_out_bounce(t: float) -> float:
    if t < 0.5:
        return (1 - ease_out_bounce(1 - 2 * t)) / 2
    return (1 + ease_out_bounce(2 * t - 1)) / 2


def ease_in_elastic(t: float) -> float:
    if t == 0 or t == 1:
        return float(t)
    return -(2 ** (10 * t - 10)) * math.sin((t * 10 - 10.75) * ELASTIC_C4)


def ease_out_elastic(t: float) -> float:
    if t == 0 or t == 1:
        return float(t)
    return 2 ** (-10 * t) * math.sin((t * 10 - 0.75) * ELASTIC_C4) + 1


def ease_in_out_elastic(t: float) -> float:
    if t == 0 or t == 1:
        return float(t)
    if t < 0.5:
        return -(2 ** (20 * t - 10) * math.sin((20 * t - 11.125) * ELASTIC_C5)) / 2
    return (2 ** (-20 * t + 10) * math.sin((20 * t - 11.125) * ELASTIC_C5)) / 2 + 1


def smooth(t: float) -> float:
    return t * t * (3 - 2 * t)


def step(t: float) -> float:
    """Hold the start value until the destination is reached"""
    return 1.0 if t >= 1 else 0.0


EASING_FUNCTIONS: Dict[str, EasingFunction] = {
    "linear": linear,
    "easeInQuad": ease_in_quad,
    "easeOutQuad": ease_out_quad,
    "easeInOutQuad": ease_in_out_quad,
    "easeInCubic": ease_in_cubic,
    "easeOutCubic": ease_out_cubic,
    "easeInOutCubic": ease_in_out_cubic,
    "easeInQuart": ease_in_quart,
    "easeOutQuart": ease_out_quart,
    "easeInOutQuart": ease_in_out_quart,
    "easeInQuint": ease_in_quint,
    "easeOutQuint": ease_out_quint,
    "easeInOutQuint": ease_in_out_quint,
    "easeInSine": ease_in_sine,
    "easeOutSine": ease_out_sine,
    "easeInOutSine": ease_in_out_sine,
    "easeInExpo": ease_in_expo,
    "easeOutExpo": ease_out_expo,
    "easeInOutExpo": ease_in_out_expo,
    "easeInCirc": ease_in_circ,
    "easeOutCirc": ease_out_circ,
    "easeInOutCirc": ease_in_out_circ,
    "easeInBack": ease_in_back,
    "easeOutBack": ease_out_back,
    "easeInOutBack": ease_in_out_back,
    "easeInBounce": ease_in_bounce,
    "easeOutBounce": ease_out_bounce,
    "easeInOutBounce": ease_in_out_bounce,
    "easeInElastic": ease_in_elastic,
    "easeOutElastic": ease_out_elastic,
    "easeInOutElastic": ease_in_out_elastic,
    # Short aliases
    "ease_in": ease_in_quad,
    "ease_out": ease_out_quad,
    "ease_in_out": ease_in_out_sine,
    "smooth": smooth,
    "step": step,
}


def register_easing(name: str, function: EasingFunction) -> EasingFunction:
    """Make ``function`` available to keyframes under ``name``"""
    if not callable(function):
        raise TypeError(f"Easing '{name}' must be callable")
    EASING_FUNCTIONS[name] = function
    return function


def cubic_bezier(x1: float, y1: float, x2: float, y2: float) -> EasingFunction:
    """Build a CSS-style cubic-bezier easing curve.

    The curve runs from (0, 0) to (1, 1) with control points (x1, y1) and
    (x2, y2). For a progress ratio ``t`` the curve parameter ``s`` with
    ``x(s) == t`` is found with Newton's method, falling back to bisection
    when the slope is too flat, and ``y(s)`` is returned.
    """
    if not (0.0 <= x1 <= 1.0 and 0.0 <= x2 <= 1.0):
        raise ValueError("Bezier x control points must be within [0, 1]")

    cx = 3.0 * x1
    bx = 3.0 * (x2 - x1) - cx
    ax = 1.0 - cx - bx
    cy = 3.0 * y1
    by = 3.0 * (y2 - y1) - cy
    ay = 1.0 - cy - by

    def sample_x(s: float) -> float:
        return ((ax * s + bx) * s + cx) * s

    def sample_y(s: float) -> float:
        return ((ay * s + by) * s + cy) * s

    def slope_x(s: float) -> float:
        return (3.0 * ax * s + 2.0 * bx) * s + cx

    def solve(t: float) -> float:
        s = t
        for _ in range(BEZIER_NEWTON_ITERATIONS):
            error = sample_x(s) - t
            if abs(error) < BEZIER_EPSILON:
                return s
            derivative = slope_x(s)
            if abs(derivative) < BEZIER_EPSILON:
                break
            s -= error / derivative

        low, high = 0.0, 1.0
        s = t
        for _ in range(BEZIER_BISECTION_ITERATIONS):
            error = sample_x(s) - t
            if abs(error) < BEZIER_EPSILON:
                break
            if error > 0:
                high = s
            else:
                low = s
            s = (low + high) / 2
        return s

    def bezier(t: float) -> float:
        if t <= 0:
            return 0.0
        if t >= 1:
            return 1.0
        return sample_y(solve(t))

    bezier.control_points = (x1, y1, x2, y2)
    return bezier


def set_bezier_function(name: str, x1: float, y1: float, x2: float, y2: float) -> EasingFunction:
    """Register a cubic-bezier curve under ``name`` and return it"""
    function = cubic_bezier(x1, y1, x2, y2)
    function.__name__ = name
    return register_easing(name, function)


def unset_bezier_function(name: str) -> bool:
    """Remove a curve added with set_bezier_function"""
    function = EASING_FUNCTIONS.get(name)
    if function is None or not hasattr(function, "control_points"):
        return False
    del EASING_FUNCTIONS[name]
    return True


def get_easing_function(easing: EasingSpec) -> EasingFunction:
    if callable(easing):
        return easing
    if not easing:
        return linear
    if easing not in EASING_FUNCTIONS:
        raise KeyError(f"Unknown easing '{easing}'")
    return EASING_FUNCTIONS[easing]


def compose_easing(names: Iterable[str],
                   easing: Union[EasingSpec, Mapping[str, EasingSpec]] = None,
                   default: EasingSpec = DEFAULT_EASING) -> Dict[str, EasingSpec]:
    """Expand an easing argument into one easing per property name.

    A single easing applies to every name; a mapping applies per name and
    names it leaves out get ``default``.
    """
    if isinstance(easing, Mapping):
        return {name: easing.get(name) or default for name in names}
    return {name: easing or default for name in names}
