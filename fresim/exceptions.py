"""Custom exceptions for the FRESIM fire-resistance simulation engine.

This module defines a hierarchy of exceptions used throughout FRESIM
to provide clear, specific error messages and enable targeted exception
handling by host applications.

Exception Hierarchy:
    FRESError (base)
    ├── ConfigurationError - Invalid configuration files or parameters
    ├── SimulationError - Errors during simulation execution
    ├── ValidationError - Input validation failures (e.g. bad dimensions)
    ├── TableError - Malformed rating tables (authoring bugs)
    └── ElementError - Element registry failures

Example:
    >>> from fresim.exceptions import ConfigurationError
    >>> raise ConfigurationError("Spread radius must be positive", parameter="spread_radius_m")
"""

from typing import Optional


class FRESError(Exception):
    """Base exception for all FRESIM-related errors.

    All custom exceptions in FRESIM inherit from this class, allowing
    hosts to catch every engine error with a single except clause.

    Example:
        >>> try:
        ...     sim.tick(0.016)
        ... except FRESError as e:
        ...     print(f"FRESIM error occurred: {e}")
    """

    pass


class ConfigurationError(FRESError):
    """Raised when a configuration file or parameter is invalid.

    This exception is raised when:
    - Required parameters are missing from a config file
    - Parameter values are out of valid ranges
    - A material, role or restraint name is not recognised

    Attributes:
        config_path (str): Path to the configuration file, if applicable.
        parameter (str): Name of the problematic parameter, if applicable.

    Example:
        >>> raise ConfigurationError(
        ...     "Time scale bounds are inverted",
        ...     config_path="/path/to/sim.json",
        ...     parameter="max_time_scale"
        ... )
    """

    def __init__(self, message: str, config_path: Optional[str] = None, parameter: Optional[str] = None):
        self.config_path = config_path
        self.parameter = parameter

        parts = []
        if config_path:
            parts.append(f"in {config_path}")
        if parameter:
            parts.append(f"parameter '{parameter}'")

        if parts:
            full_message = f"{message} ({', '.join(parts)})"
        else:
            full_message = message

        super().__init__(full_message)


class SimulationError(FRESError):
    """Raised when the simulation is driven into an invalid state.

    Attributes:
        sim_time_s (float): Simulated time when the error occurred, if available.

    Example:
        >>> raise SimulationError("run() called while the clock is stopped", sim_time_s=0.0)
    """

    def __init__(self, message: str, sim_time_s: Optional[float] = None):
        self.sim_time_s = sim_time_s

        if sim_time_s is not None:
            full_message = f"{message} (at sim time {sim_time_s:.1f}s)"
        else:
            full_message = message

        super().__init__(full_message)


class ValidationError(FRESError):
    """Raised when input validation fails.

    This exception is raised when:
    - A dimension is NaN, infinite or negative
    - A time delta is negative
    - A coordinate tuple has the wrong shape

    Attributes:
        field (str): Name of the field that failed validation, if applicable.
        value: The invalid value, if applicable.

    Example:
        >>> raise ValidationError(
        ...     "Dimensions must be finite and non-negative",
        ...     field="cover_m",
        ...     value=-0.02
        ... )
    """

    def __init__(self, message: str, field: Optional[str] = None, value=None):
        self.field = field
        self.value = value

        parts = []
        if field:
            parts.append(f"field '{field}'")
        if value is not None:
            parts.append(f"value={value!r}")

        if parts:
            full_message = f"{message} ({', '.join(parts)})"
        else:
            full_message = message

        super().__init__(full_message)


class TableError(FRESError):
    """Raised when a rating table is malformed.

    Tables are static reference data, so an empty, unsorted or non-finite
    table is an authoring bug and is rejected when the table is built.

    Attributes:
        table_name (str): Name of the offending table, if applicable.

    Example:
        >>> raise TableError("Thresholds must be strictly ascending", table_name="wall/Siliceous")
    """

    def __init__(self, message: str, table_name: Optional[str] = None):
        self.table_name = table_name

        if table_name:
            full_message = f"{message} (table: {table_name})"
        else:
            full_message = message

        super().__init__(full_message)


class ElementError(FRESError):
    """Raised when an element registry operation fails.

    Attributes:
        element_id (int): The element id involved, if applicable.

    Example:
        >>> raise ElementError("Duplicate element id", element_id=12)
    """

    def __init__(self, message: str, element_id: Optional[int] = None):
        self.element_id = element_id

        if element_id is not None:
            full_message = f"{message} (element id: {element_id})"
        else:
            full_message = message

        super().__init__(full_message)
