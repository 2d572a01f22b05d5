"""
Custom Exceptions Module

This module defines the exception hierarchy for the spatializer,
providing more specific error types for better error handling.
"""

class SpatializerError(Exception):
    """Base exception class for all spatializer errors."""
    pass


class ConfigurationError(SpatializerError):
    """Error in layout or spatializer configuration."""
    pass


class ValidationError(SpatializerError):
    """Error during parameter validation."""
    pass


class MathError(SpatializerError):
    """Error in mathematical calculations."""
    
    class DomainError(SpatializerError):
        """Error due to input values outside the valid domain."""
        pass
