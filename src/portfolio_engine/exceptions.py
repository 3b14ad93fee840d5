class PortfolioEngineError(Exception):
    """Base class for errors raised by the portfolio engine"""
    pass

class UnknownStrategyError(PortfolioEngineError, ValueError):
    """Raised when a rebalancing strategy name is not recognized"""
    pass

class InvalidTargetError(PortfolioEngineError, ValueError):
    """Raised when target allocations cannot produce a meaningful plan"""
    pass

class DuplicatePositionError(PortfolioEngineError, ValueError):
    """Raised when a symbol appears more than once where holdings must be unique"""
    pass
