"""Custom exceptions for package-curator."""


class PackageCuratorError(Exception):
    """Base exception for all package-curator errors."""

    pass


class ConfigurationError(PackageCuratorError):
    """Exception raised when configuration is invalid."""

    pass


class InvalidQueryError(PackageCuratorError):
    """Exception raised when a sort, filter or pagination option is invalid."""

    pass


class DataSourceError(PackageCuratorError):
    """Exception raised when package data cannot be loaded from a source."""

    pass
