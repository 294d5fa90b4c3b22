# physics_utils.py

import math
import numpy as np

TWO_PI = 2.0 * math.pi

class PhysicsError(Exception):
    """Custom exception for physics-related errors, including numerical issues."""
    pass

class NumericDegeneracy(PhysicsError):
    """Raised when a geometric solve has no real solution (e.g. a negative discriminant).

    With validated parameters this should be unreachable; it is raised instead of
    letting NaN positions propagate into the rest of the tick.
    """
    pass

def normalize_vector(vector, epsilon=1e-12):
    """
    Normalizes a vector to unit length.

    Args:
        vector (np.ndarray): The vector to normalize.
        epsilon (float): Threshold below which the vector's magnitude is considered zero.

    Returns:
        np.ndarray: The normalized vector, or a zero vector if its magnitude is close to zero.
    """
    if not isinstance(vector, np.ndarray):
        vector = np.array(vector, dtype=float)

    norm = np.linalg.norm(vector)
    if norm < epsilon:
        return np.zeros_like(vector, dtype=float)
    return vector / norm

def wrap_angle(angle: float) -> float:
    """Wraps any angle in radians into [0, 2*pi)."""
    wrapped = math.fmod(angle, TWO_PI)
    if wrapped < 0:
        wrapped += TWO_PI
    if wrapped >= TWO_PI: # -1e-17 + 2*pi rounds up to 2*pi
        wrapped = 0.0
    return wrapped + 0.0 # drop the sign of -0.0

def normalize_atan2_angle(angle: float) -> float:
    """
    Maps an atan2 result from (-pi, pi] into [0, 2*pi).

    Angles in (-pi, 0) get 2*pi added. atan2 can also return exactly -pi for a
    negative-zero y component, which is folded onto pi here as well.
    """
    if -math.pi <= angle < 0:
        angle += TWO_PI
    return wrap_angle(angle)

def nearest_angle_delta(delta: float) -> float:
    """Returns the representative of `delta` (mod 2*pi) closest to zero, in [-pi, pi)."""
    return wrap_angle(delta + math.pi) - math.pi

def threshold_angle_delta(last_angle: float, new_angle: float, threshold: float = math.pi / 2) -> float:
    """
    Difference between two atan2 angles, corrected by +/-2*pi across the branch cut.

    A crossing is recognised only when the previous angle sits beyond +threshold
    and the new one beyond -threshold (or the reverse). This works when the step
    per call is small compared with `threshold`; larger steps are taken literally.
    """
    delta = new_angle - last_angle
    if last_angle > threshold and new_angle < -threshold:
        delta += TWO_PI
    elif last_angle < -threshold and new_angle > threshold:
        delta -= TWO_PI
    return delta

def solve_quadratic_positive_root(b: float, c: float, a: float = 1.0) -> float:
    """
    Larger root of a*x^2 + b*x + c = 0, i.e. (-b + sqrt(b^2 - 4ac)) / 2a.

    Raises:
        NumericDegeneracy: If the discriminant is negative or `a` is zero.
    """
    if a == 0:
        raise NumericDegeneracy("Leading coefficient of the quadratic is zero.")
    discriminant = b * b - 4.0 * a * c
    if discriminant < 0 or math.isnan(discriminant):
        raise NumericDegeneracy(f"Negative discriminant {discriminant} (b={b}, c={c}, a={a}).")
    return (-b + math.sqrt(discriminant)) / (2.0 * a)

def round_half_up(value: float, decimals: int = 0) -> float:
    """Rounds to `decimals` places with halves going up, unlike the built-in round()."""
    scale = 10 ** decimals
    return math.floor(value * scale + 0.5) / scale

def distance(first, second) -> float:
    """Euclidean distance between two 2D points."""
    return float(np.linalg.norm(np.asarray(first, dtype=np.float64) - np.asarray(second, dtype=np.float64)))
