"""This module contains functions for unit conversions"""

def m_to_mm(f_m: float) -> float:
    """Converts from meters to millimeters

    Args:
        f_m (float): meters

    Returns:
        _type_: float
    """
    g = 1000
    mm = f_m * g

    return mm

def hr_to_s(f_hr: float) -> float:
    """Converts from hours to seconds

    Args:
        f_hr (float): hours

    Returns:
        _type_: float
    """
    g = 3600
    s = f_hr * g

    return s

def s_to_hr(f_s: float) -> float:
    """Converts from seconds to hours

    Args:
        f_s (float): seconds

    Returns:
        _type_: float
    """
    g = 1 / hr_to_s(1)
    h = f_s * g

    return h

def m_min_to_m_s(f_m_min: float) -> float:
    """Converts from meters per minute to meters per second

    Args:
        f_m_min (float): meters per minute

    Returns:
        _type_: float
    """
    g = 60
    m_s = f_m_min / g

    return m_s
