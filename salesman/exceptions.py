class SalesmanError(Exception):
    """Base for all salesman exceptions."""

    pass


class ConfigurationError(SalesmanError, ValueError):
    """Invalid run settings or environment parameters."""

    pass


class EvolutionError(SalesmanError):
    """Generation loop driven outside a running state."""

    pass
