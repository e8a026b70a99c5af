"""Exception types for factory flow.

Non-fatal topology problems (cyclic flow, disconnected nodes) are not
exceptions; they are reported as ``SimulationEvent`` warnings.
"""


class FactoryFlowError(Exception):
    """Base class for factory flow errors."""

    pass


class ConfigurationError(FactoryFlowError):
    """Raised when a layout cannot be simulated or loaded.

    Covers a missing start node, too few connected nodes and edges that
    reference unknown equipment.
    """

    pass
